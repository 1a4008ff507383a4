"""Agent onboarding: a User and its SalesAgent profile, created together."""
from __future__ import annotations

import logging
from typing import Mapping

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.api.exceptions import Conflict

from .models import SalesAgent, User
from .permissions import PermissionMap

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def temporary_password() -> str:
    password = settings.AGENT_TEMP_PASSWORD
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"AGENT_TEMP_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def onboard_agent(data: Mapping) -> SalesAgent:
    """Create the agent's user account and profile in one transaction.

    `data` is validated onboarding input: name, email, optional password,
    agent_type, commission_rate, access_level and the `<resource>_<action>`
    permission flags (only read when access_level is custom).
    """
    email = data["email"]
    if User.objects.filter(email__iexact=email).exists():
        raise Conflict("A user with this email already exists")

    access_level = data.get("access_level") or "view"
    permissions = PermissionMap.from_flags(data).as_dict() if access_level == "custom" else {}
    password = data.get("password") or temporary_password()

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=data["name"],
                role=User.ROLE_AGENT,
                access_level=access_level,
                permissions=permissions,
            )
            agent = SalesAgent.objects.create(
                user=user,
                agent_type=data.get("agent_type") or "Both",
                commission_rate=data.get("commission_rate") or 0,
            )
    except IntegrityError:
        # Lost a race with a concurrent onboarding of the same email.
        raise Conflict("A user with this email already exists")

    logger.info("Onboarded sales agent %s (user %s, access %s)", agent.pk, user.pk, access_level)
    return agent
