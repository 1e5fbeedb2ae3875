from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'reimbursements'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.ReimbursementViewSet, basename='reimbursement')

urlpatterns = [
    # Reimbursement ViewSet routes
    # GET    /api/reimbursements/                 - List all requests (admin)
    # GET    /api/reimbursements/{id}/            - Request details
    # GET    /api/reimbursements/mine/            - Current user's requests
    # GET    /api/reimbursements/pending/         - Waiting for transfer (admin)
    # POST   /api/reimbursements/{id}/transfer/   - Mark transferred (admin)
    # POST   /api/reimbursements/{id}/confirm/    - Confirm or dispute (settler)
    
    # Include router URLs
    path('', include(router.urls)),
]
