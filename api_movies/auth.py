"""
Session side of the federated login.

The OpenID Connect exchange itself is handled by an external client; once it
has a verified profile it calls ``link_federated_account`` and then
``login_user`` with the result. That client owns the route the login page
links to, set with ``FEDERATED_LOGIN_URL``; this app does not serve it.
"""

import logging
from datetime import datetime, timezone
from html import escape

from flask import Blueprint, current_app, redirect, request, session

from .database import Database

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"
SESSION_USER_KEY = "user"
DEFAULT_FEDERATED_LOGIN_URL = "/login/federated/google"

auth_blueprint = Blueprint("auth", __name__)


def _first_value(entries):
    if not entries:
        return None
    first = entries[0]
    if isinstance(first, dict):
        return first.get("value")
    return None


def link_federated_account(database: Database, issuer: str, profile: dict):
    """
    Find or create the local user linked to a federated identity.

    Args:
        database (Database): Shared database handle.
        issuer (str): Identity provider issuer URL.
        profile (dict): Verified profile with ``id``, ``displayName``, ``emails`` and ``photos``.

    Returns:
        dict | None: Principal with ``id``, ``name``, ``email`` and ``profilePicture``,
        or None when the credential points at a user that no longer exists.
    """
    users_collection = database.get_collection("users")
    credentials_collection = database.get_collection("federated_credentials")
    subject = str(profile.get("id"))

    credential = credentials_collection.find_one({"provider": issuer, "subject": subject})
    if not credential:
        now = datetime.now(timezone.utc)
        new_user = {
            "name": profile.get("displayName"),
            "email": _first_value(profile.get("emails")),
            "profilePicture": _first_value(profile.get("photos")),
            "createdAt": now,
            "updatedAt": now,
        }
        result = users_collection.insert_one(new_user)
        user_id = result.inserted_id
        credentials_collection.insert_one({
            "user_id": user_id,
            "provider": issuer,
            "subject": subject,
            "createdAt": now,
        })
        logger.info("Created user %s for %s subject %s", user_id, issuer, subject)
        return {
            "id": user_id,
            "name": new_user["name"],
            "email": new_user["email"],
            "profilePicture": new_user["profilePicture"],
        }

    user = users_collection.find_one({"_id": credential.get("user_id")})
    if not user:
        logger.warning("Credential for %s subject %s references a missing user", issuer, subject)
        return None

    return {
        "id": user["_id"],
        "name": user.get("name"),
        "email": user.get("email"),
        "profilePicture": user.get("profilePicture"),
    }


def login_user(principal: dict):
    """
    Store the authenticated principal in the session.

    Args:
        principal (dict): Result of ``link_federated_account``.
    """
    session[SESSION_USER_KEY] = {
        "id": str(principal.get("id")),
        "name": principal.get("name"),
        "email": principal.get("email"),
    }


def current_principal():
    return session.get(SESSION_USER_KEY)


def principal_email():
    """
    Return the email of the logged-in user.

    Returns:
        str: Email, or ``anonymous`` when nobody is logged in.
    """
    principal = current_principal() or {}
    return principal.get("email") or ANONYMOUS_USER


@auth_blueprint.route("/login", methods=["GET"])
def login_page():
    login_url = escape(current_app.config.get("FEDERATED_LOGIN_URL") or DEFAULT_FEDERATED_LOGIN_URL)
    error = request.args.get("error")
    if error:
        description = request.args.get("error_description") or "No description provided"
        logger.error("Login error: %s %s", error, description)
        return (
            "<h1>Login Error</h1>"
            f"<p>Error: {escape(error)}</p>"
            f"<p>Description: {escape(description)}</p>"
            f'<p><a href="{login_url}">Try again</a></p>'
        )
    return f'<h1>Login</h1><p><a href="{login_url}">Login with Google</a></p>'


@auth_blueprint.route("/logout", methods=["GET"])
def logout():
    session.pop(SESSION_USER_KEY, None)
    return redirect("/")
