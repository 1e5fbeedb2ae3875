from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'snacks'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.SnackMenuViewSet, basename='menu')

urlpatterns = [
    # Snack menu ViewSet routes
    # GET    /api/snacks/                         - List menus
    # POST   /api/snacks/                         - Open a menu (free-form, or with a catalog)
    # GET    /api/snacks/active/                  - Newest open catalog menu + my order
    # GET    /api/snacks/orders/mine/             - My catalog order lines
    # PATCH  /api/snacks/orders/{order_id}/       - Change a line quantity
    # DELETE /api/snacks/orders/{order_id}/       - Drop a line
    # GET    /api/snacks/{id}/                    - Menu details
    # POST   /api/snacks/{id}/items/              - Add free-form item
    # DELETE /api/snacks/{id}/items/{item_id}/    - Remove own item
    # GET    /api/snacks/{id}/orders/             - Per-member order summary
    # POST   /api/snacks/{id}/orders/             - Replace my catalog order
    # POST   /api/snacks/{id}/settle/             - Settle (creator or admin)
    # POST   /api/snacks/{id}/cancel/             - Cancel (creator or admin)
    
    # Include router URLs
    path('', include(router.urls)),
]
