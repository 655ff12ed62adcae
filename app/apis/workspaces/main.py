from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from app.core.config import settings
from app.core.db_services import CounterService
from app.apis.deps import get_ankix_client, get_counter_service, get_workspace
from app.modules.flashcards.client import AnkiXClient
from app.modules.importer import ExportInProgressError
from app.modules.upload import (
    GenerationInProgressError,
    NothingSelectedError,
    SelectedFile,
)
from app.modules.workspace import Workspace, workspace_manager
from .schemas import (
    CardUpdate,
    ExportStateRead,
    FeedbackRequest,
    FeedbackStateRead,
    FlashcardRead,
    FlashcardsView,
    GenerateResponse,
    NavigationRequest,
    OptionsUpdate,
    PageRead,
    PaginationRead,
    SelectedFileRead,
    SelectionResponse,
    UploadStateRead,
    WorkspaceState,
)


router = APIRouter()

CurrentWorkspace = Annotated[Workspace, Depends(get_workspace)]
Client = Annotated[AnkiXClient, Depends(get_ankix_client)]

BASE = f"/{settings.app.version}/workspaces"


def _ws_url(ws: Workspace, suffix: str) -> str:
    return f"{BASE}/{ws.id}/{suffix}"


def _upload_state(ws: Workspace) -> UploadStateRead:
    up = ws.upload
    pdf = None
    if up.pdf is not None:
        pdf = SelectedFileRead(
            filename=up.pdf.filename, size=up.pdf.size, content_type=up.pdf.content_type
        )
    return UploadStateRead(
        pdf=pdf,
        images=[
            SelectedFileRead(
                filename=f.filename,
                size=f.size,
                content_type=f.content_type,
                preview_url=_ws_url(ws, f"images/{i}"),
            )
            for i, f in enumerate(up.images)
        ],
        card_type=up.card_type,
        system_prompt=up.system_prompt,
        user_prompt=up.user_prompt,
        error=up.error,
        busy=up.busy,
    )


def _flashcards_view(ws: Workspace) -> FlashcardsView:
    pg = ws.paginator
    return FlashcardsView(
        total_cards=ws.collection.total_cards,
        pages=[
            PageRead(
                index=i,
                flashcards=[
                    FlashcardRead(index=j, front=c.front, back=c.back, type=c.type)
                    for j, c in enumerate(page.flashcards)
                ],
            )
            for i, page in pg.visible_pages()
        ],
        pagination=PaginationRead(
            current_page=pg.current_page,
            current_group=pg.current_group,
            total_pages=ws.collection.total_pages,
            total_groups=pg.total_groups,
            pages_per_group=pg.group_size,
            has_next_group=pg.has_next_group,
            has_prev_group=pg.has_prev_group,
            has_next_page=pg.has_next_page,
            has_prev_page=pg.has_prev_page,
        ),
    )


def _export_state(ws: Workspace) -> ExportStateRead:
    art = ws.artifact
    return ExportStateRead(
        ready=art is not None,
        download_url=_ws_url(ws, "download") if art is not None else None,
        filename=art.filename if art is not None else None,
        size=art.size if art is not None else None,
        error=ws.importer.error,
        busy=ws.importer.busy,
    )


def _feedback_state(ws: Workspace) -> FeedbackStateRead:
    fb = ws.feedback
    return FeedbackStateRead(status=fb.status, sending=fb.sending, feedback=fb.feedback)


def _state(ws: Workspace) -> WorkspaceState:
    return WorkspaceState(
        id=ws.id,
        created_at=ws.created_at.isoformat().replace("+00:00", "Z"),
        upload=_upload_state(ws),
        flashcards=_flashcards_view(ws),
        export=_export_state(ws),
        feedback=_feedback_state(ws),
    )


async def _read(file: UploadFile) -> SelectedFile:
    content = await file.read()
    return SelectedFile(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type,
    )


# Workspace lifecycle ------------------------------------------------------


@router.post(
    BASE,
    response_model=WorkspaceState,
    status_code=status.HTTP_201_CREATED,
    tags=["workspaces"],
)
async def create_workspace() -> WorkspaceState:
    return _state(workspace_manager.create())


@router.get(f"{BASE}/{{workspace_id}}", response_model=WorkspaceState, tags=["workspaces"])
async def get_workspace_state(ws: CurrentWorkspace) -> WorkspaceState:
    return _state(ws)


@router.delete(
    f"{BASE}/{{workspace_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["workspaces"],
)
async def discard_workspace(ws: CurrentWorkspace) -> Response:
    workspace_manager.discard(ws.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# File selection -----------------------------------------------------------


@router.post(
    f"{BASE}/{{workspace_id}}/pdf", response_model=SelectionResponse, tags=["upload"]
)
async def select_pdf(ws: CurrentWorkspace, file: UploadFile = File(...)) -> SelectionResponse:
    accepted = ws.select_pdf(await _read(file))
    return SelectionResponse(accepted=accepted, upload=_upload_state(ws))


@router.post(
    f"{BASE}/{{workspace_id}}/images", response_model=SelectionResponse, tags=["upload"]
)
async def add_images(
    ws: CurrentWorkspace, files: list[UploadFile] = File(...)
) -> SelectionResponse:
    selected = [await _read(f) for f in files]
    accepted = ws.select_images(selected)
    return SelectionResponse(accepted=accepted, upload=_upload_state(ws))


@router.get(f"{BASE}/{{workspace_id}}/images/{{index:int}}", tags=["upload"])
async def preview_image(index: int, ws: CurrentWorkspace) -> Response:
    images = ws.upload.images
    if not 0 <= index < len(images):
        raise HTTPException(status_code=404, detail="Image not found")
    img = images[index]
    return Response(content=img.content, media_type=img.content_type or "image/jpeg")


@router.delete(
    f"{BASE}/{{workspace_id}}/images/{{index:int}}",
    response_model=UploadStateRead,
    tags=["upload"],
)
async def remove_image(index: int, ws: CurrentWorkspace) -> UploadStateRead:
    try:
        ws.upload.remove_image(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Image not found")
    return _upload_state(ws)


@router.put(
    f"{BASE}/{{workspace_id}}/options", response_model=UploadStateRead, tags=["upload"]
)
async def update_options(req: OptionsUpdate, ws: CurrentWorkspace) -> UploadStateRead:
    ws.upload.set_options(
        card_type=req.card_type,
        system_prompt=req.system_prompt,
        user_prompt=req.user_prompt,
    )
    return _upload_state(ws)


# Generation ---------------------------------------------------------------


@router.post(
    f"{BASE}/{{workspace_id}}/generate",
    response_model=GenerateResponse,
    tags=["flashcards"],
)
async def generate_flashcards(
    ws: CurrentWorkspace,
    client: Client,
    counter: CounterService = Depends(get_counter_service),
) -> GenerateResponse:
    try:
        outcome = await ws.generate(client, counter)
    except GenerationInProgressError:
        raise HTTPException(status_code=409, detail="Generation already in progress")
    except NothingSelectedError:
        raise HTTPException(status_code=400, detail="No file selected")
    if not outcome.ok:
        raise HTTPException(status_code=502, detail=outcome.error)
    return GenerateResponse(
        pages=outcome.pages,
        cards_created=outcome.cards_created,
        counter_before=outcome.counter_before,
        flashcards=_flashcards_view(ws),
    )


# Collection editing -------------------------------------------------------


@router.get(
    f"{BASE}/{{workspace_id}}/flashcards",
    response_model=FlashcardsView,
    tags=["flashcards"],
)
async def get_flashcards(ws: CurrentWorkspace) -> FlashcardsView:
    return _flashcards_view(ws)


@router.post(
    f"{BASE}/{{workspace_id}}/navigation",
    response_model=FlashcardsView,
    tags=["flashcards"],
)
async def navigate(req: NavigationRequest, ws: CurrentWorkspace) -> FlashcardsView:
    pg = ws.paginator
    if req.action == "go_to_page":
        if req.page is None:
            raise HTTPException(status_code=422, detail="page is required for go_to_page")
        pg.go_to_page(req.page)
    else:
        getattr(pg, req.action)()
    return _flashcards_view(ws)


@router.patch(
    f"{BASE}/{{workspace_id}}/pages/{{page_index:int}}/cards/{{card_index:int}}",
    response_model=FlashcardRead,
    tags=["flashcards"],
)
async def edit_card(
    page_index: int, card_index: int, req: CardUpdate, ws: CurrentWorkspace
) -> FlashcardRead:
    try:
        card = ws.collection.edit_field(page_index, card_index, req.field, req.value)
    except IndexError:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return FlashcardRead(index=card_index, front=card.front, back=card.back, type=card.type)


@router.delete(
    f"{BASE}/{{workspace_id}}/pages/{{page_index:int}}/cards/{{card_index:int}}",
    response_model=FlashcardsView,
    tags=["flashcards"],
)
async def delete_card(
    page_index: int, card_index: int, ws: CurrentWorkspace
) -> FlashcardsView:
    try:
        ws.collection.delete_card(page_index, card_index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return _flashcards_view(ws)


# Import file --------------------------------------------------------------


@router.post(
    f"{BASE}/{{workspace_id}}/export",
    response_model=ExportStateRead,
    tags=["export"],
)
async def export_flashcards(ws: CurrentWorkspace, client: Client) -> ExportStateRead:
    if ws.collection.total_pages == 0:
        raise HTTPException(status_code=400, detail="No flashcards to export")
    try:
        artifact = await ws.export(client)
    except ExportInProgressError:
        raise HTTPException(status_code=409, detail="Export already in progress")
    if artifact is None:
        raise HTTPException(status_code=502, detail=ws.importer.error)
    return _export_state(ws)


@router.get(f"{BASE}/{{workspace_id}}/download", tags=["export"])
async def download_import_file(ws: CurrentWorkspace) -> Response:
    art = ws.artifact
    if art is None:
        raise HTTPException(status_code=404, detail="No import file available")
    return Response(
        content=art.content,
        media_type=art.media_type,
        headers={"Content-Disposition": f'attachment; filename="{art.filename}"'},
    )


# Feedback -----------------------------------------------------------------


@router.get(
    f"{BASE}/{{workspace_id}}/feedback",
    response_model=FeedbackStateRead,
    tags=["feedback"],
)
async def get_feedback_state(ws: CurrentWorkspace) -> FeedbackStateRead:
    return _feedback_state(ws)


@router.post(
    f"{BASE}/{{workspace_id}}/feedback",
    response_model=FeedbackStateRead,
    tags=["feedback"],
)
async def send_feedback(req: FeedbackRequest, ws: CurrentWorkspace) -> FeedbackStateRead:
    await ws.feedback.submit(req.message)
    return _feedback_state(ws)
