from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'lunch'

# Router for ViewSets
router = DefaultRouter()
router.register(r'sessions', views.LunchSessionViewSet, basename='session')

urlpatterns = [
    # Current session (tomorrow's after the order cutoff)
    path('today/', views.today, name='today'),
    path('today/join/', views.join_today, name='today-join'),
    path('today/leave/', views.leave_today, name='today-leave'),
    path('today/claim/', views.claim_today, name='today-claim'),
    path('today/payment/', views.submit_payment, name='today-payment'),
    path('history/', views.history, name='history'),
    
    # Session ViewSet routes
    # GET    /api/lunch/sessions/                       - List sessions
    # GET    /api/lunch/sessions/{id}/                  - Session details
    # POST   /api/lunch/sessions/{id}/select_buyers/    - Run buyer rotation (admin)
    # POST   /api/lunch/sessions/{id}/cancel/           - Cancel session (admin)
    
    # Include router URLs
    path('', include(router.urls)),
]
