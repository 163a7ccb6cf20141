"""
HTTP API for daily-write.

Document routes mirror the editor's contract with the server:

- ``GET /api/google-docs``: recent documents
- ``POST /api/google-docs``: ``action`` = ``create`` | ``getTabs`` | ``getContent``
  (raw text and word count) | default (fetch as markdown)
- ``PUT /api/google-docs``: replace a document with markdown

Session, goal and stats routes expose the data store to the dashboard.
Every error is answered as ``{"error": message}``.
"""

import asyncio
import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from auth.credentials import extract_bearer_token
from core.container import Container, get_container
from core.errors import (
    CredentialsNotFoundError,
    DailyWriteError,
    ResourceNotFoundError,
    ValidationError,
    http_status_for,
)
from core.utils import (
    today_string,
    validate_date,
    validate_document_id,
    validate_markdown,
    validate_non_negative_int,
    validate_title,
)
from storage.models import Goal, WritingSession
from storage.stats import compute_writing_stats

logger = logging.getLogger(__name__)


class DocumentRequest(BaseModel):
    """Body of POST /api/google-docs. Fields are checked per action."""

    model_config = ConfigDict(populate_by_name=True)

    action: str | None = None
    title: Any = None
    document_id: Any = Field(None, alias="documentId")
    tab_id: str | None = Field(None, alias="tabId")


class UpdateDocumentRequest(BaseModel):
    """Body of PUT /api/google-docs."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: Any = Field(None, alias="documentId")
    markdown: Any = None
    tab_id: str | None = Field(None, alias="tabId")


class WritingSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    date: str
    word_count: Any = Field(..., alias="wordCount")


class GoalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    daily_word_target: Any = Field(..., alias="dailyWordTarget")

    def to_goal(self, goal_id: str | None = None) -> Goal:
        start_date = validate_date(self.start_date, "startDate")
        end_date = validate_date(self.end_date, "endDate")
        if end_date < start_date:
            raise ValidationError("endDate must not be before startDate", field="endDate")
        target = validate_non_negative_int(self.daily_word_target, "dailyWordTarget")
        goal = Goal(user_id=self.user_id, start_date=start_date, end_date=end_date, daily_word_target=target)
        if goal_id:
            goal.id = goal_id
        return goal


def get_access_token(authorization: str | None = Header(None)) -> str:
    """Bearer token of the signed-in user; 401 when absent."""
    token = extract_bearer_token(authorization)
    if not token:
        raise CredentialsNotFoundError()
    return token


def create_app(container: Container | None = None) -> FastAPI:
    """
    Build the API application.

    Args:
        container: Dependencies to use. When omitted the global container is
            looked up on every request, so tests can swap it with set_container().
    """
    app = FastAPI(title="daily-write")

    def current_container() -> Container:
        return container or get_container()

    @app.exception_handler(DailyWriteError)
    async def handle_daily_write_error(request: Request, exc: DailyWriteError):
        status_code = http_status_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse({"error": str(exc)}, status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
            message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
        else:
            message = "Invalid request"
        return JSONResponse({"error": message}, status_code=400)

    # ------------------------------------------------------------------
    # Google Docs
    # ------------------------------------------------------------------

    @app.get("/api/google-docs")
    async def list_documents(access_token: str = Depends(get_access_token)):
        gateway = current_container().gateway_factory(access_token)
        docs = await gateway.list_recent_documents()
        return {"docs": [doc.to_dict() for doc in docs]}

    @app.post("/api/google-docs")
    async def document_action(body: DocumentRequest, access_token: str = Depends(get_access_token)):
        if body.action == "create":
            title = validate_title(body.title)
            gateway = current_container().gateway_factory(access_token)
            doc = await gateway.create_document(title)
            return {"doc": doc.to_dict()}

        document_id = validate_document_id(body.document_id)
        gateway = current_container().gateway_factory(access_token)
        if body.action == "getTabs":
            tabs = await gateway.list_tabs(document_id)
            return {"tabs": [tab.to_dict() for tab in tabs]}
        if body.action == "getContent":
            return await gateway.get_document_word_count(document_id, body.tab_id)

        markdown = await gateway.fetch_as_markdown(document_id, body.tab_id)
        return {"markdown": markdown}

    @app.put("/api/google-docs")
    async def update_document(body: UpdateDocumentRequest, access_token: str = Depends(get_access_token)):
        document_id = validate_document_id(body.document_id)
        markdown = validate_markdown(body.markdown)
        gateway = current_container().gateway_factory(access_token)
        result = await gateway.replace_with_markdown(document_id, markdown, body.tab_id)
        return result.to_dict()

    # ------------------------------------------------------------------
    # Writing sessions
    # ------------------------------------------------------------------

    @app.get("/api/sessions/{user_id}")
    async def list_sessions(user_id: str, start: str | None = None, end: str | None = None):
        store = current_container().data_store
        if start or end:
            start_date = validate_date(start, "start")
            end_date = validate_date(end, "end")
            sessions = await asyncio.to_thread(store.get_writing_sessions_in_range, user_id, start_date, end_date)
        else:
            sessions = await asyncio.to_thread(store.get_all_writing_sessions, user_id)
        return {"sessions": [s.to_dict() for s in sessions]}

    @app.get("/api/sessions/{user_id}/{date}")
    async def get_session(user_id: str, date: str):
        date = validate_date(date)
        session = await asyncio.to_thread(current_container().data_store.get_writing_session, user_id, date)
        if session is None:
            raise ResourceNotFoundError(f"No writing session for {date}", status_code=404)
        return {"session": session.to_dict()}

    @app.put("/api/sessions")
    async def upsert_session(body: WritingSessionRequest):
        session = WritingSession(
            user_id=body.user_id,
            date=validate_date(body.date),
            word_count=validate_non_negative_int(body.word_count, "wordCount"),
        )
        stored = await asyncio.to_thread(current_container().data_store.upsert_writing_session, session)
        return {"session": stored.to_dict()}

    @app.delete("/api/sessions/{user_id}/{date}")
    async def delete_session(user_id: str, date: str):
        date = validate_date(date)
        await asyncio.to_thread(current_container().data_store.delete_writing_session, user_id, date)
        return {"success": True}

    @app.get("/api/stats/{user_id}")
    async def get_stats(user_id: str, today: str | None = None):
        today = validate_date(today, "today") if today else today_string()
        sessions = await asyncio.to_thread(current_container().data_store.get_all_writing_sessions, user_id)
        return {"stats": compute_writing_stats(sessions, today).to_dict()}

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    @app.get("/api/goals/{user_id}")
    async def list_goals(user_id: str):
        goals = await asyncio.to_thread(current_container().data_store.get_all_goals, user_id)
        return {"goals": [g.to_dict() for g in goals]}

    @app.get("/api/goals/{user_id}/current")
    async def get_current_goal(user_id: str, today: str | None = None):
        today = validate_date(today, "today") if today else today_string()
        goal = await asyncio.to_thread(current_container().data_store.get_current_goal, user_id, today)
        return {"goal": goal.to_dict() if goal else None}

    @app.post("/api/goals")
    async def create_goal(body: GoalRequest):
        goal = await asyncio.to_thread(current_container().data_store.create_goal, body.to_goal())
        return {"goal": goal.to_dict()}

    @app.put("/api/goals/{goal_id}")
    async def update_goal(goal_id: str, body: GoalRequest):
        goal = await asyncio.to_thread(current_container().data_store.update_goal, body.to_goal(goal_id))
        return {"goal": goal.to_dict()}

    @app.delete("/api/goals/{goal_id}")
    async def delete_goal(goal_id: str):
        await asyncio.to_thread(current_container().data_store.delete_goal, goal_id)
        return {"success": True}

    return app
