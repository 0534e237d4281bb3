"""
Wizard endpoints shared by every intake form page.

``mount_wizard(router, path, resolve)`` registers, below ``path``:

GET    {path}                          - current step, form data and options
POST   {path}/update                   - set fields and/or toggle a multi-select option
POST   {path}/next                     - advance one step (no-op at the last)
POST   {path}/previous                 - go back one step (no-op at the first)
POST   {path}/submit                   - required-field check, then the backend call
DELETE {path}                          - discard the draft
POST   {path}/team-members             - active-business only: add a member
PUT    {path}/team-members/{index}     - active-business only: edit a member
DELETE {path}/team-members/{index}     - active-business only: remove a member

``resolve`` turns the request into a :class:`WizardBinding`: which form
class, which draft key, what to seed it with and what to call on submit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from portal import config
from portal.api.schemas import TeamMemberBody, WizardUpdate
from portal.auth import COOKIE_NAME, current_user, reissue_session
from portal.domain.models import SessionUser, Toast
from portal.forms import ActiveBusinessForm, StepForm
from portal.forms.store import WizardStore
from portal.navigation import layout

logger = logging.getLogger(__name__)


@dataclass
class WizardBinding:
    form_key: str
    form_cls: Type[StepForm]
    on_submit: Callable[[Dict[str, Any]], Awaitable[Any]]
    redirect: str
    success_message: str
    initial_data: Optional[Dict[str, Any]] = None
    title: str = ""
    # Mark the session's user as having completed intake after submit.
    marks_intake_completed: bool = False


Resolver = Callable[[Request, SessionUser], Awaitable[WizardBinding]]

_store = WizardStore()


def load_form(user: SessionUser, binding: WizardBinding) -> StepForm:
    """The session's draft for ``binding``, or a fresh form seeded from its initial data."""
    form = _store.load(user.session_id, binding.form_key, binding.form_cls)
    if form is None:
        form = binding.form_cls(binding.initial_data)
        _store.save(user.session_id, binding.form_key, form)
    return form


def wizard_page(request: Request, user: SessionUser, binding: WizardBinding) -> dict:
    form = load_form(user, binding)
    return {**layout(user, request.url.path), "title": binding.title, "wizard": form.view()}


def _team_form(form: StepForm) -> ActiveBusinessForm:
    if not isinstance(form, ActiveBusinessForm):
        raise HTTPException(status_code=404, detail="This form has no team members.")
    return form


def _member_index(form: ActiveBusinessForm, index: int) -> int:
    if index < 0 or index >= len(form.team_members):
        raise HTTPException(status_code=404, detail="No such team member.")
    return index


def mount_wizard(router: APIRouter, path: str, resolve: Resolver, include_view: bool = True) -> None:
    """Register the wizard endpoints for ``path`` on ``router``."""

    async def _resolved(request: Request, user: SessionUser):
        binding = await resolve(request, user)
        return binding, load_form(user, binding)

    def _saved(user: SessionUser, binding: WizardBinding, form: StepForm) -> dict:
        _store.save(user.session_id, binding.form_key, form)
        return {"wizard": form.view()}

    if include_view:
        @router.get(path)
        async def wizard_view(request: Request, user: SessionUser = Depends(current_user)):
            binding = await resolve(request, user)
            return wizard_page(request, user, binding)

    @router.delete(path)
    async def wizard_discard(request: Request, user: SessionUser = Depends(current_user)):
        binding = await resolve(request, user)
        _store.discard(user.session_id, binding.form_key)
        return {"status": "discarded"}

    @router.post(path + "/update")
    async def wizard_update(body: WizardUpdate, request: Request, user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        if body.fields:
            form.update(body.fields)
        if body.toggle is not None:
            form.toggle_option(body.toggle.field, body.toggle.value, body.toggle.checked)
        return _saved(user, binding, form)

    @router.post(path + "/next")
    async def wizard_next(request: Request, user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        form.next()
        return _saved(user, binding, form)

    @router.post(path + "/previous")
    async def wizard_previous(request: Request, user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        form.previous()
        return _saved(user, binding, form)

    @router.post(path + "/submit")
    async def wizard_submit(request: Request, user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        result = await form.submit(binding.on_submit)
        _store.discard(user.session_id, binding.form_key)
        logger.info("%s submitted %s form (%s)", user.email, form.form_type.value, binding.form_key)

        response = JSONResponse({
            "toast": Toast.success(binding.success_message).model_dump(mode="json"),
            "redirect": binding.redirect,
            "data": result,
        })
        if binding.marks_intake_completed:
            response.set_cookie(
                COOKIE_NAME,
                reissue_session(user, intake_completed=True),
                max_age=config.SESSION_EXPIRY_SECONDS,
                httponly=True,
                samesite="lax",
                secure=config.SESSION_COOKIE_SECURE,
            )
        return response

    @router.post(path + "/team-members")
    async def team_member_add(request: Request, user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        _team_form(form).add_team_member()
        return _saved(user, binding, form)

    @router.put(path + "/team-members/{index}")
    async def team_member_update(index: int, body: TeamMemberBody, request: Request,
                                 user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        team = _team_form(form)
        team.update_team_member(_member_index(team, index), body.model_dump())
        return _saved(user, binding, form)

    @router.delete(path + "/team-members/{index}")
    async def team_member_remove(index: int, request: Request, user: SessionUser = Depends(current_user)):
        binding, form = await _resolved(request, user)
        team = _team_form(form)
        team.remove_team_member(_member_index(team, index))
        return _saved(user, binding, form)


def normalize_intake(intake: dict) -> Dict[str, Any]:
    """Backend intake record -> wizard initial data with list/object fields defaulted."""
    data = dict(intake)
    for key in ("marketing_channels", "investor_type_seeking", "support_needed", "previous_employment",
                "team_members", "industries_interested", "investment_types_interested", "investor_types"):
        if key in data and not isinstance(data[key], list):
            data[key] = []
    for key in ("current_employment", "education"):
        if not isinstance(data.get(key), dict):
            data.pop(key, None)
    for key in ("_id", "id", "user_id", "status", "form_type", "created_at", "updated_at", "__v"):
        data.pop(key, None)
    return data
