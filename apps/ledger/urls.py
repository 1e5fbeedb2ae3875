from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

# Router for ViewSets
router = DefaultRouter()
router.register(r'deposits', views.DepositViewSet, basename='deposit')

urlpatterns = [
    # GET    /api/ledger/transactions/           - Current user's history
    path('transactions/', views.transactions, name='transactions'),
    # POST   /api/ledger/adjustments/            - Adjust a balance (admin)
    path('adjustments/', views.adjustments, name='adjustments'),
    # GET    /api/ledger/stats/                  - Fund statistics (admin)
    path('stats/', views.stats, name='stats'),
    
    # Deposit ViewSet routes
    # POST   /api/ledger/deposits/               - Request a deposit
    # GET    /api/ledger/deposits/pending/       - Pending deposits (admin)
    # POST   /api/ledger/deposits/{id}/approve/  - Approve deposit (admin)
    # POST   /api/ledger/deposits/{id}/reject/   - Reject deposit (admin)
    
    # Include router URLs
    path('', include(router.urls)),
]
