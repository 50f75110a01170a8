"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views
from api.v1 import analytics_views as analytics_api_views
from api.v1 import finance_views as finance_api_views
from api.auth_views import (
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    CSRFTokenAPIView,
    LogoutAPIView,
    MeAPIView,
    RegisterAPIView,
)

router = DefaultRouter()
router.register(r'firms', v1_views.FirmViewSet)
router.register(r'stores', v1_views.StoreViewSet)
router.register(r'influencers', v1_views.InfluencerViewSet)
router.register(r'products', v1_views.ProductViewSet)
router.register(r'campaigns', v1_views.CampaignViewSet)
router.register(r'courier-shipments', v1_views.CourierShipmentViewSet, basename='courier-shipment')
router.register(r'invoices', finance_api_views.InvoiceImageViewSet, basename='invoice')
router.register(r'payouts', finance_api_views.PayoutViewSet, basename='payout')
router.register(r'financial-documents', finance_api_views.FinancialDocumentViewSet, basename='financial-document')


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),

    # Auth endpoints
    path('auth/register/', RegisterAPIView.as_view(), name='auth-register'),
    path('auth/csrf/', CSRFTokenAPIView.as_view(), name='auth-csrf'),
    path('auth/token/', CookieTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', LogoutAPIView.as_view(), name='auth-logout'),
    path('auth/me/', MeAPIView.as_view(), name='auth-me'),

    # Analytics
    path('analytics/metrics/', analytics_api_views.PerformanceMetricListCreateAPIView.as_view(), name='analytics-metrics'),
    path('analytics/metrics/<uuid:pk>/', analytics_api_views.PerformanceMetricDetailAPIView.as_view(), name='analytics-metric-detail'),
    path('analytics/aggregated/', analytics_api_views.AggregatedAnalyticsAPIView.as_view(), name='analytics-aggregated'),
    path('analytics/store/<uuid:store_id>/aggregated/', analytics_api_views.StoreAggregatedAnalyticsAPIView.as_view(), name='analytics-store-aggregated'),
    path('analytics/firm/<uuid:firm_id>/aggregated/', analytics_api_views.FirmAggregatedAnalyticsAPIView.as_view(), name='analytics-firm-aggregated'),
    path('analytics/influencer/<uuid:influencer_id>/score/', analytics_api_views.InfluencerScoreAPIView.as_view(), name='analytics-influencer-score'),
    path('analytics/influencer/<uuid:influencer_id>/instagram/', analytics_api_views.InfluencerInstagramAPIView.as_view(), name='analytics-influencer-instagram'),
    path('analytics/campaign/<uuid:campaign_id>/budget-utilization/', analytics_api_views.CampaignBudgetUtilizationAPIView.as_view(), name='analytics-campaign-budget'),
    path('analytics/snapshots/', analytics_api_views.AnalyticsSnapshotListAPIView.as_view(), name='analytics-snapshots'),
]
