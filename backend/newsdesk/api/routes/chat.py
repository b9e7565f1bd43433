"""
Chat API Routes

Endpoints:
- POST /api/chat/guest - Canned replies for visitors without an account
- POST /api/chat/generate-pdf[/guest] - Build the news report PDF
- GET /api/chats - List the user's chats
- GET /api/chat/{chat_id} - Turns of a chat
- POST /api/chat/new - Start a chat with a first message
- POST /api/chat/{chat_id} - Send a message
- DELETE /api/chat/{chat_id} - Delete a chat
- POST /api/upload/pdf - Open a user PDF in a chat
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from fastapi.responses import JSONResponse

from newsdesk.adapters.llm import LLMError
from newsdesk.api.dependencies import (
    get_chat_service,
    get_conversation_service,
    get_report_builder,
    get_upload_dir,
)
from newsdesk.api.schemas import (
    ChatSummary,
    GeneratePdfRequest,
    GuestChatRequest,
    MessageRequest,
    MessageResponse,
    NewChatResponse,
    TurnOut,
)
from newsdesk.auth.dependencies import get_current_user
from newsdesk.conversation.intent import guest_reply
from newsdesk.conversation.service import ChatAccessDenied, ChatService, TurnCancelled
from newsdesk.conversation.turns import TurnType
from newsdesk.core.models import User
from newsdesk.core.prompts import Replies
from newsdesk.reports.builder import NewsReportBuilder, ReportGenerationError
from newsdesk.utils.pdf_parser import extract_pdf_text
from newsdesk.utils.uploads import pdf_filename, save_upload, timestamp_ms

router = APIRouter()
logger = logging.getLogger(__name__)


def _access_denied() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def _login_required(text: str) -> dict:
    return TurnOut(
        id=timestamp_ms(), sender="ai", text=text, type=TurnType.LOGIN_REQUIRED.value
    ).model_dump(by_alias=True)


# --- Guests ---


@router.post("/chat/guest", response_model=TurnOut, response_model_exclude_none=True)
async def guest_chat(request: GuestChatRequest):
    """Small talk for visitors; everything else asks them to log in."""
    if request.messages is None:
        raise HTTPException(status_code=400, detail="Messages array is required.")

    last_text = request.messages[-1].text if request.messages else ""
    reply = guest_reply(last_text)
    if reply is not None:
        return TurnOut(id=timestamp_ms(), sender="ai", text=reply, type=TurnType.TEXT.value)
    return JSONResponse(_login_required(Replies.LOGIN_REQUIRED))


@router.post("/chat/generate-pdf/guest")
async def guest_generate_pdf():
    return JSONResponse(
        _login_required(Replies.LOGIN_REQUIRED_PDF), status_code=status.HTTP_403_FORBIDDEN
    )


# --- Reports ---


@router.post("/chat/generate-pdf", response_model=TurnOut)
async def generate_pdf(
    request: GeneratePdfRequest,
    user: User = Depends(get_current_user),
    builder: NewsReportBuilder = Depends(get_report_builder),
    chats: ChatService = Depends(get_chat_service),
):
    """Build the news report; persisted into the chat when ``chatId`` is given."""
    try:
        if request.chat_id is not None:
            await chats.owned_chat(user.id, request.chat_id)
        turn = await builder.build()
        if request.chat_id is not None:
            turn = await chats.save_report(user.id, request.chat_id, turn)
    except ChatAccessDenied:
        raise _access_denied()
    except ReportGenerationError as e:
        logger.error(f"PDF Generation Error (User): {e}")
        raise HTTPException(status_code=500, detail="Failed to generate PDF.")

    return TurnOut.from_turn(turn)


# --- Chats ---


@router.get("/chats", response_model=List[ChatSummary])
async def list_chats(
    user: User = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
):
    return [ChatSummary.from_chat(chat) for chat in await chats.list_chats(user.id)]


@router.get("/chat/{chat_id}", response_model=List[TurnOut])
async def get_chat(
    chat_id: int,
    user: User = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
):
    try:
        turns = await chats.get_turns(user.id, chat_id)
    except ChatAccessDenied:
        raise _access_denied()
    return [TurnOut.from_turn(turn) for turn in turns]


@router.post("/chat/new", response_model=NewChatResponse, status_code=status.HTTP_201_CREATED)
async def new_chat(
    request: MessageRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    chats: ChatService = Depends(get_conversation_service),
):
    """Create a chat from its first message and answer it."""
    try:
        created = await chats.start_chat(
            user.id, request.message, is_cancelled=http_request.is_disconnected
        )
    except TurnCancelled:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except LLMError as e:
        logger.error(f"New Chat Error: {e}")
        raise HTTPException(status_code=500, detail=Replies.APOLOGY)

    return NewChatResponse(
        chat_id=created.chat_id,
        messages=[TurnOut.from_turn(turn) for turn in created.turns],
    )


@router.post("/chat/{chat_id}", response_model=TurnOut)
async def send_message(
    chat_id: int,
    request: MessageRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    chats: ChatService = Depends(get_conversation_service),
):
    """Send a message to an existing chat and get the AI turn back."""
    try:
        reply = await chats.respond(
            user.id, chat_id, request.message, is_cancelled=http_request.is_disconnected
        )
    except ChatAccessDenied:
        raise _access_denied()
    except TurnCancelled:
        logger.info(f"Client left chat {chat_id} before the reply; nothing stored")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except LLMError as e:
        logger.error(f"Existing Chat Error: {e}")
        raise HTTPException(status_code=500, detail=Replies.APOLOGY)

    return TurnOut.from_turn(reply)


@router.delete("/chat/{chat_id}", response_model=MessageResponse)
async def delete_chat(
    chat_id: int,
    user: User = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
):
    try:
        await chats.delete_chat(user.id, chat_id)
    except ChatAccessDenied:
        raise _access_denied()
    return MessageResponse(message="Chat deleted successfully")


# --- Uploads ---


@router.post(
    "/upload/pdf",
    response_model=Union[NewChatResponse, TurnOut],
    status_code=status.HTTP_201_CREATED,
)
async def upload_pdf(
    userPdf: Optional[UploadFile] = File(None),
    chatId: Optional[int] = Form(None),
    user: User = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
    upload_dir: Path = Depends(get_upload_dir),
):
    """Store a user PDF and open it as the chat's document context."""
    if userPdf is None or not userPdf.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    if chatId is not None:
        try:
            await chats.owned_chat(user.id, chatId)
        except ChatAccessDenied:
            raise _access_denied()

    original_name = userPdf.filename
    filename = pdf_filename()
    _, content = await save_upload(userPdf, upload_dir / "pdfs", filename)
    context = await asyncio.to_thread(extract_pdf_text, content)

    try:
        attached = await chats.attach_pdf(
            user.id,
            chatId,
            filename=original_name,
            text=Replies.PDF_UPLOADED.format(filename=original_name),
            url=f"/uploads/pdfs/{filename}",
            context=context,
        )
    except ChatAccessDenied:
        raise _access_denied()

    turn = TurnOut.from_turn(attached.turns[0])
    if chatId is None:
        return NewChatResponse(chat_id=attached.chat_id, messages=[turn])
    return turn
