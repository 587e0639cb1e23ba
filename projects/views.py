from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.pagination import LimitOffsetPagination
from rest_framework import status

from . import services
from .models import Project
from .serializers import ProjectSerializer, ProjectWriteSerializer


class ProjectListCreateView(APIView):
    """
    GET  /api/projects/?status=funding&category=&country=&limit=&offset=
    POST /api/projects/   (entrepreneur or admin)
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        status_param = request.query_params.get("status", Project.Status.FUNDING)
        if status_param == "all":
            status_param = None

        qs = services.list_projects(
            status=status_param,
            category=request.query_params.get("category"),
            country=request.query_params.get("country"),
        )

        paginator = LimitOffsetPagination()
        paginator.default_limit = 20
        page = paginator.paginate_queryset(qs, request)
        serializer = ProjectSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def post(self, request):
        serializer = ProjectWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = services.create_project(request.user, serializer.validated_data)
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)


class ProjectDetailView(APIView):
    """
    GET   /api/projects/<id>/
    PATCH /api/projects/<id>/   (owner or admin, draft only)
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, project_id):
        project = services.get_project(project_id)
        return Response(ProjectSerializer(project).data)

    def patch(self, request, project_id):
        serializer = ProjectWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        project = services.update_project(request.user, project_id, serializer.validated_data)
        return Response(ProjectSerializer(project).data)


class ProjectActionView(APIView):
    """
    POST /api/projects/<id>/<action>/
    Subclasses bind one lifecycle service.
    """
    permission_classes = [IsAuthenticated]
    service = None
    message = ""

    def post(self, request, project_id):
        project = self.service(request.user, project_id)
        return Response({
            "message": self.message,
            "project": ProjectSerializer(project).data,
        })


class ProjectSubmitView(ProjectActionView):
    service = staticmethod(services.submit_project)
    message = "Project submitted for approval"


class ProjectApproveView(ProjectActionView):
    service = staticmethod(services.approve_project)
    message = "Project approved"


class ProjectRejectView(ProjectActionView):
    service = staticmethod(services.reject_project)
    message = "Project rejected and returned to draft"


class ProjectLaunchView(ProjectActionView):
    service = staticmethod(services.launch_project)
    message = "Project launched to funding"


class ProjectCloseView(ProjectActionView):
    service = staticmethod(services.close_project)
    message = "Project closed"
