from __future__ import annotations

from http import HTTPStatus
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from orangeslice.common.settings import get_settings
from orangeslice.domain.dataclasses.reports import SaveReport
from orangeslice.domain.entities.entry import EntryFields
from orangeslice.domain.errors import AuthError, EditorBusy, GatewayError, RecordNotFound
from orangeslice.domain.ports.auth import AuthenticatorPort, CurrentUser
from orangeslice.services.api.deps import get_authenticator, get_context, get_token, require_admin
from orangeslice.services.catalog.entries import entries_with_tags
from orangeslice.services.context import AppContext
from orangeslice.services.schemas import (
    AdminPage,
    CurrentUserRead,
    EditorRead,
    EntryRead,
    EntryWrite,
    SaveResultRead,
    StatusLineRead,
    TagCreate,
    TagRead,
    TagUpdate,
)

cfg = get_settings()
page_router = APIRouter(tags=["admin"])
router = APIRouter(
    prefix=f"{cfg.api.prefix}/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _user_out(user: CurrentUser) -> CurrentUserRead:
    return CurrentUserRead(username=user.username, email=user.email, display_name=user.display_name)


def _fields(payload: EntryWrite) -> EntryFields:
    return EntryFields(
        name=payload.name,
        github_link=payload.github_link,
        project_link=payload.project_link,
        image_url=payload.image_url,
    )


def _result(ctx: AppContext, report: SaveReport) -> SaveResultRead:
    entry: Optional[EntryRead] = None
    if report.ok and report.entry_id is not None and report.operation != "delete":
        # the save is already committed; a failed read-back only loses the echo
        try:
            found = ctx.gateway.entries.get(report.entry_id)
        except GatewayError as e:
            ctx.status_log.error(f"Reading back entry {report.entry_id} failed: {e}")
            found = None
        entry = EntryRead.model_validate(found) if found is not None else None
    return SaveResultRead(
        operation=report.operation,
        ok=report.ok,
        entry=entry,
        tag_ids=report.tag_ids,
        steps=report.steps,
        links_created=report.links_created,
        links_deleted=report.links_deleted,
        compensated=report.compensated,
        errors={subject: message for subject, message in report.error_details},
    )


def _raise_for(ctx: AppContext, report: SaveReport) -> None:
    """Map a failed SaveReport to the matching HTTP error."""
    if report.ok:
        return
    if report.not_found:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Entry not found")
    if "confirm" in report.validation_errors:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=report.validation_errors["confirm"])
    if report.is_validation_failure:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail={"message": "Please fill in all required fields", "errors": report.validation_errors},
        )
    raise HTTPException(
        status_code=HTTPStatus.BAD_GATEWAY,
        detail=_result(ctx, report).model_dump(mode="json"),
    )


def _busy(e: EditorBusy) -> HTTPException:
    return HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(e))


# ---------- admin page ----------

@page_router.get("/admin", response_model=AdminPage)
def admin_page(
    user: CurrentUser = Depends(require_admin),
    ctx: AppContext = Depends(get_context),
) -> AdminPage:
    try:
        entries = entries_with_tags(ctx.gateway)
        tags = [TagRead.model_validate(t) for t in ctx.gateway.tags.list()]
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
    return AdminPage(
        user=_user_out(user),
        entries=entries,
        available_tags=tags,
        editors=[EditorRead(key=e.key, entry_id=e.entry_id, state=e.state) for e in ctx.editors.active()],
        status_log=[StatusLineRead(**line.as_dict()) for line in ctx.status_log.lines()],
    )


# ---------- entries ----------

@router.post("/entries", response_model=SaveResultRead, status_code=HTTPStatus.CREATED)
def create_entry(payload: EntryWrite, ctx: AppContext = Depends(get_context)) -> SaveResultRead:
    report = ctx.workflow.create(_fields(payload), payload.tag_ids)
    _raise_for(ctx, report)
    return _result(ctx, report)


@router.put("/entries/{entry_id}", response_model=SaveResultRead)
def update_entry(entry_id: UUID, payload: EntryWrite, ctx: AppContext = Depends(get_context)) -> SaveResultRead:
    try:
        report = ctx.workflow.edit(entry_id, _fields(payload), payload.tag_ids)
    except EditorBusy as e:
        raise _busy(e)
    _raise_for(ctx, report)
    return _result(ctx, report)


@router.delete("/entries/{entry_id}", status_code=HTTPStatus.NO_CONTENT)
def delete_entry(
    entry_id: UUID,
    confirm: bool = Query(False, description="Must be true; deletion is irreversible"),
    ctx: AppContext = Depends(get_context),
) -> Response:
    try:
        report = ctx.workflow.delete(entry_id, confirmed=confirm)
    except EditorBusy as e:
        raise _busy(e)
    _raise_for(ctx, report)
    return Response(status_code=HTTPStatus.NO_CONTENT)


# ---------- tags ----------

@router.post("/tags", response_model=TagRead, status_code=HTTPStatus.CREATED)
def create_tag(payload: TagCreate, ctx: AppContext = Depends(get_context)) -> TagRead:
    data = payload.model_dump()
    data["name"] = data["name"].strip()
    try:
        taken = {t.name.strip().lower() for t in ctx.gateway.tags.list()}
        if data["name"].lower() in taken:
            raise HTTPException(status_code=HTTPStatus.CONFLICT, detail="Tag name already exists")
        obj = ctx.gateway.tags.create(**data)
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
    ctx.status_log.info(f"Tag {obj.name} created")
    return TagRead.model_validate(obj)


@router.patch("/tags/{tag_id}", response_model=TagRead)
def patch_tag(tag_id: UUID, payload: TagUpdate, ctx: AppContext = Depends(get_context)) -> TagRead:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        if not changes:
            obj = ctx.gateway.tags.get(tag_id)
            if obj is None:
                raise RecordNotFound("tag", tag_id)
        else:
            if "name" in changes:
                changes["name"] = changes["name"].strip()
                taken = {t.name.strip().lower() for t in ctx.gateway.tags.list() if t.id != tag_id}
                if changes["name"].lower() in taken:
                    raise HTTPException(status_code=HTTPStatus.CONFLICT, detail="Tag name already exists")
            obj = ctx.gateway.tags.update(tag_id, **changes)
    except RecordNotFound:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Tag not found")
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
    return TagRead.model_validate(obj)


@router.delete("/tags/{tag_id}", status_code=HTTPStatus.NO_CONTENT)
def delete_tag(tag_id: UUID, ctx: AppContext = Depends(get_context)) -> Response:
    # links go first through the gateway so their live queries see the change
    try:
        links = ctx.gateway.entry_tags.list({"tag_id": tag_id})
        ctx.gateway.entry_tags.delete_many([link.id for link in links])
        ctx.gateway.tags.delete(tag_id)
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
    ctx.status_log.info(f"Tag {tag_id} deleted ({len(links)} link(s) removed)")
    return Response(status_code=HTTPStatus.NO_CONTENT)


# ---------- session ----------

@router.get("/status", response_model=List[StatusLineRead])
def status_lines(
    limit: Optional[int] = Query(None, ge=0),
    ctx: AppContext = Depends(get_context),
) -> List[StatusLineRead]:
    return [StatusLineRead(**line.as_dict()) for line in ctx.status_log.lines(limit)]


@router.post("/sign-out", status_code=HTTPStatus.NO_CONTENT)
def sign_out(token: str = Depends(get_token), auth: AuthenticatorPort = Depends(get_authenticator)) -> Response:
    try:
        auth.sign_out(token)
    except AuthError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
    return Response(status_code=HTTPStatus.NO_CONTENT)
