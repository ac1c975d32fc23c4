"""
URL mappings for the clinic API.

Fixed paths are listed before the generic ``api/<kind>`` routes, which
would otherwise swallow them.  Trailing slashes are omitted to match the
front end.
"""
from django.urls import include, path

from .auth_views import login_view, logout_view, session_view
from .views import dashboard, database, health, navigation, records

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/session', session_view, name='session_view'),
    # Navigation and gate preview
    path('api/navigation', navigation.navigation, name='navigation'),
    path('api/access/<str:resource>', navigation.access_preview),
    # Dashboard and statistics
    path('api/dashboard', dashboard.dashboard),
    path('api/stats/appointments', dashboard.appointment_stats),
    path('api/stats/inventory', dashboard.inventory_stats),
    # Database management
    path('api/admin/database/export', database.export_database),
    path('api/admin/database/reset', database.reset_database),
    # Relations
    path('api/patients/<str:patient_id>/<str:relation>', records.patient_related),
    path('api/doctors/<str:doctor_id>/appointments', records.doctor_appointments),
    # Records of every kind
    path('api/<str:kind>', records.collection_view),
    path('api/<str:kind>/<str:record_id>', records.record_view),
]
