"""
Order routes, mounted at /api/v1/orders/.

    GET  <id>/           order detail
    POST <id>/advance/   next lifecycle status
"""

from rest_framework.routers import SimpleRouter

from .views import OrderViewSet

router = SimpleRouter()
router.register("", OrderViewSet, basename="order")

urlpatterns = router.urls
