# projects/services.py
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from core.constants import ACTIVITY_PROJECT_CREATED, ACTIVITY_PROJECT_UPDATED
from core.exceptions import InvalidState, NotFound
from core.policies import MarketplacePolicy, enforce
from core.services import ActivityService

from .models import Project
from .state_machine import PROJECT_TRANSITIONS

logger = logging.getLogger("predika.projects")


def get_project(project_id, for_update=False):
    qs = Project.objects.select_related("owner")
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=project_id)
    except (Project.DoesNotExist, ValueError, ValidationError):
        raise NotFound("Project not found")


def list_projects(status=Project.Status.FUNDING, category=None, country=None):
    qs = Project.objects.select_related("owner")
    if status:
        qs = qs.filter(status=status)
    if category:
        qs = qs.filter(category=category)
    if country:
        qs = qs.filter(country=country)
    return qs.order_by("-created_at")


def create_project(user, data):
    enforce(MarketplacePolicy.can_create_project(user))

    project = Project.objects.create(owner=user, status=Project.Status.DRAFT, **data)
    ActivityService.log_activity(
        actor=user,
        verb=ACTIVITY_PROJECT_CREATED,
        target=project,
        metadata={"title": project.title, "target_amount": str(project.target_amount)},
    )
    logger.info("Project created: %s by user=%s", project.pk, user.pk)
    return project


def update_project(user, project_id, data):
    with transaction.atomic():
        project = get_project(project_id, for_update=True)
        enforce(MarketplacePolicy.can_edit_project(user, project))

        if project.status != Project.Status.DRAFT:
            raise InvalidState("Only draft projects can be updated")

        for attr, value in data.items():
            setattr(project, attr, value)
        project.save()

    ActivityService.log_activity(
        actor=user,
        verb=ACTIVITY_PROJECT_UPDATED,
        target=project,
        metadata={"fields": sorted(data.keys())},
    )
    logger.info("Project updated: %s", project.pk)
    return project


def _transition(user, project_id, action, verdict_for):
    with transaction.atomic():
        project = get_project(project_id, for_update=True)
        enforce(verdict_for(user, project))
        PROJECT_TRANSITIONS.apply(project, action, actor=user)
    return project


def submit_project(user, project_id):
    return _transition(user, project_id, "submit", MarketplacePolicy.can_edit_project)


def approve_project(user, project_id):
    return _transition(user, project_id, "approve", MarketplacePolicy.can_review_project)


def reject_project(user, project_id):
    """Rejection sends the project back to draft for rework."""
    return _transition(user, project_id, "reject", MarketplacePolicy.can_review_project)


def launch_project(user, project_id):
    return _transition(user, project_id, "launch", MarketplacePolicy.can_review_project)


def close_project(user, project_id):
    return _transition(user, project_id, "close", MarketplacePolicy.can_review_project)
