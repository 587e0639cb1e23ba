from django.urls import path

from .views import (
    ProjectListCreateView,
    ProjectDetailView,
    ProjectSubmitView,
    ProjectApproveView,
    ProjectRejectView,
    ProjectLaunchView,
    ProjectCloseView,
)

urlpatterns = [
    path("", ProjectListCreateView.as_view(), name="project-list"),
    path("<uuid:project_id>/", ProjectDetailView.as_view(), name="project-detail"),
    path("<uuid:project_id>/submit/", ProjectSubmitView.as_view(), name="project-submit"),
    path("<uuid:project_id>/approve/", ProjectApproveView.as_view(), name="project-approve"),
    path("<uuid:project_id>/reject/", ProjectRejectView.as_view(), name="project-reject"),
    path("<uuid:project_id>/launch/", ProjectLaunchView.as_view(), name="project-launch"),
    path("<uuid:project_id>/close/", ProjectCloseView.as_view(), name="project-close"),
]
