"""
URL mappings for the registry API.

Trailing slashes are deliberately omitted to match the front-end.
"""
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view, create_user
from .views import health
from .views.patients import patients, patient_detail, patient_markers
from .views.streets import list_streets


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    path('api/users', create_user, name='create_user'),
    # Patients
    path('api/patients', patients, name='patients'),
    path('api/patients/markers', patient_markers, name='patient_markers'),
    path('api/patients/<int:pk>', patient_detail, name='patient_detail'),
    # Streets
    path('api/streets', list_streets, name='streets'),
]
