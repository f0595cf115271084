from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from spinwheel.api.deps import SessionRuntime, get_runtime
from spinwheel.api.models import (
    AddEntryRequest,
    CoinTossResponse,
    DrawOutcome,
    DrawResultRequest,
    DuplicatesResponse,
    Entry,
    ImportRequest,
    ImportResponse,
    NamesRequest,
    RenameEntryRequest,
    SessionView,
    SettingsUpdateRequest,
)
from spinwheel.coin import flip_coin
from spinwheel.errors import InvalidStateError, NoUndoAvailableError, NotFoundError, SessionError
from spinwheel.ingest import import_names

router = APIRouter()


def _http_error(e: SessionError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (NoUndoAvailableError, InvalidStateError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.websocket("/ws/session")
async def session_updates_ws(websocket: WebSocket) -> None:
    runtime: SessionRuntime = websocket.app.state.runtime
    await runtime.hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await runtime.hub.disconnect(websocket)
    except Exception:
        await runtime.hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/session", response_model=SessionView)
async def get_session_route(rt: SessionRuntime = Depends(get_runtime)) -> SessionView:
    return rt.session.view()


@router.get("/entries", response_model=list[Entry])
async def list_entries_route(rt: SessionRuntime = Depends(get_runtime)) -> list[Entry]:
    return rt.session.entries


@router.post("/entries", response_model=Entry, status_code=status.HTTP_201_CREATED)
async def add_entry_route(payload: AddEntryRequest, rt: SessionRuntime = Depends(get_runtime)) -> Entry:
    try:
        entry = rt.session.add_one(payload.name)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return entry


@router.post("/entries/import", response_model=ImportResponse)
async def import_entries_route(payload: ImportRequest, rt: SessionRuntime = Depends(get_runtime)) -> ImportResponse:
    try:
        result = import_names(rt.session, payload.names, choice=payload.choice, clear_first=payload.clear_first)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return ImportResponse(added=result.added, duplicates=result.duplicates)


@router.post("/entries/duplicates", response_model=DuplicatesResponse)
async def find_duplicates_route(payload: NamesRequest, rt: SessionRuntime = Depends(get_runtime)) -> DuplicatesResponse:
    return DuplicatesResponse(duplicates=rt.session.find_duplicates(payload.names))


@router.patch("/entries/{entry_id}", response_model=Entry)
async def rename_entry_route(
    entry_id: str,
    payload: RenameEntryRequest,
    rt: SessionRuntime = Depends(get_runtime),
) -> Entry:
    try:
        entry = rt.session.rename(entry_id, payload.name)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return entry


@router.delete("/entries/{entry_id}", response_model=Entry)
async def remove_entry_route(entry_id: str, rt: SessionRuntime = Depends(get_runtime)) -> Entry:
    try:
        entry = rt.session.remove(entry_id)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return entry


@router.delete("/entries", response_model=SessionView)
async def clear_entries_route(rt: SessionRuntime = Depends(get_runtime)) -> SessionView:
    rt.session.clear_all()
    await rt.flush()
    return rt.session.view()


@router.put("/entries", response_model=list[Entry])
async def replace_entries_route(payload: NamesRequest, rt: SessionRuntime = Depends(get_runtime)) -> list[Entry]:
    try:
        entries = rt.session.replace_with_names(payload.names)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return entries


@router.put("/settings", response_model=SessionView)
async def update_settings_route(payload: SettingsUpdateRequest, rt: SessionRuntime = Depends(get_runtime)) -> SessionView:
    if payload.mode is not None:
        rt.session.set_mode(payload.mode)
    if payload.persist_draw_result is not None:
        rt.session.set_persist_draw_result(payload.persist_draw_result)
    if payload.sound_enabled is not None:
        rt.session.set_sound_enabled(payload.sound_enabled)

    await rt.flush()
    return rt.session.view()


@router.post("/draw/pick", response_model=Entry)
async def pick_winner_route(rt: SessionRuntime = Depends(get_runtime)) -> Entry:
    try:
        return rt.session.pick_winner()
    except SessionError as e:
        raise _http_error(e) from e


@router.post("/draw/result", response_model=DrawOutcome)
async def record_draw_route(payload: DrawResultRequest, rt: SessionRuntime = Depends(get_runtime)) -> DrawOutcome:
    try:
        outcome = rt.session.record_draw_result(payload.entry_id)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return outcome


@router.post("/draw/spin", response_model=DrawOutcome)
async def spin_route(rt: SessionRuntime = Depends(get_runtime)) -> DrawOutcome:
    """Pick and record in one step, for clients that don't animate."""

    try:
        winner = rt.session.pick_winner()
        outcome = rt.session.record_draw_result(winner)
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return outcome


@router.post("/draw/undo", response_model=Entry)
async def undo_draw_route(rt: SessionRuntime = Depends(get_runtime)) -> Entry:
    try:
        entry = rt.session.undo_last_draw()
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return entry


@router.post("/reset", response_model=SessionView)
async def reset_route(rt: SessionRuntime = Depends(get_runtime)) -> SessionView:
    try:
        rt.session.reset_to_snapshot()
    except SessionError as e:
        raise _http_error(e) from e

    await rt.flush()
    return rt.session.view()


@router.post("/coin", response_model=CoinTossResponse)
async def coin_toss_route(rt: SessionRuntime = Depends(get_runtime)) -> CoinTossResponse:
    return CoinTossResponse(side=flip_coin(rt.coin_rng))
