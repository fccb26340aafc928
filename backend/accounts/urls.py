from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views import (
    BulkCreateUsersView,
    DemoteStudentView,
    DepartmentStudentsView,
    MeView,
    PromoteStudentView,
)

urlpatterns = [
    path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', MeView.as_view(), name='me'),
    path('bulk-create-users/', BulkCreateUsersView.as_view(), name='bulk_create_users'),
    path('students/', DepartmentStudentsView.as_view(), name='department_students'),
    path('students/<int:pk>/promote/', PromoteStudentView.as_view(), name='student_promote'),
    path('students/<int:pk>/demote/', DemoteStudentView.as_view(), name='student_demote'),
]
