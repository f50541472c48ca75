"""
Prescription routes, mounted at /api/v1/prescriptions/.

Besides the model routes: POST <id>/refill/ and GET <id>/refills/.
"""

from rest_framework.routers import SimpleRouter

from .views import PrescriptionViewSet

router = SimpleRouter()
router.register("", PrescriptionViewSet, basename="prescription")

urlpatterns = router.urls
