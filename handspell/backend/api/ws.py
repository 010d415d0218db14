from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import asyncio
import time
import os
import logging
import concurrent.futures

from handspell.backend.ml.fingerspell import FingerspellSession, InvalidFrame

router = APIRouter()

DEBUG_WS = os.getenv("HANDSPELL_WS_DEBUG", "0") == "1"
# 0 => process every frame we keep up with (no backlog builds up).
INFER_EVERY_MS = int(os.getenv("HANDSPELL_WS_INFER_EVERY_MS", "0"))

logger = logging.getLogger("handspell_ws")


def _make_tracker():
    # camera frames only; landmark clients never load MediaPipe
    from handspell.backend.ml.fingerspell.tracker import HandTracker

    return HandTracker()


def _process_image(session: FingerspellSession, data_url: str, ts_ms: int) -> dict:
    from handspell.backend.ml.fingerspell.tracker import decode_frame_bgr

    if session.tracker is None:
        session.tracker = _make_tracker()
    frame = decode_frame_bgr(data_url)
    return session.process_frame_bgr(frame, ts_ms)


@router.websocket("/ws/fingerspell")
async def fingerspell_ws(ws: WebSocket):
    await ws.accept()

    alive = True

    ping_interval_s = 10.0
    last_ping = time.monotonic()

    # one-slot queue => always the latest frame, no lag accumulates
    q: asyncio.Queue[dict] = asyncio.Queue(maxsize=1)

    frames_in = 0
    frames_dropped = 0
    invalid = 0
    decode_err = 0
    steps = 0
    last_debug = 0.0

    # the session lives on one worker thread: every call into it goes
    # through this executor, so it never sees two frames at once
    loop = asyncio.get_running_loop()
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    session = FingerspellSession(ws.app.state.registry.config)

    async def receiver():
        nonlocal alive, frames_in, frames_dropped
        try:
            while True:
                msg = await ws.receive_json()
                kind = msg.get("type")

                if kind in ("clear", "backspace"):
                    action = session.clear if kind == "clear" else session.backspace
                    text = await loop.run_in_executor(executor, action)
                    await ws.send_json({"type": "text", "text": text})
                    continue

                if kind not in ("landmarks", "frame"):
                    continue
                frames_in += 1
                if q.full():
                    frames_dropped += 1
                    try:
                        q.get_nowait()
                    except asyncio.QueueEmpty:
                        pass
                q.put_nowait(msg)
        except WebSocketDisconnect:
            alive = False
            raise

    async def pinger():
        nonlocal last_ping, alive
        try:
            while alive:
                now = time.monotonic()
                if (now - last_ping) > ping_interval_s:
                    last_ping = now
                    try:
                        await ws.send_json({"type": "ping"})
                    except Exception:
                        alive = False
                        break
                await asyncio.sleep(0.25)
        except asyncio.CancelledError:
            return

    recv_task = asyncio.create_task(receiver())
    ping_task = asyncio.create_task(pinger())

    try:
        last_step = 0.0
        infer_every_s = max(0.0, INFER_EVERY_MS / 1000.0)

        while alive:
            if recv_task.done():
                break
            try:
                msg = await asyncio.wait_for(q.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue

            now = time.monotonic()

            if infer_every_s > 0 and (now - last_step) < infer_every_s:
                continue
            last_step = now

            try:
                if msg["type"] == "landmarks":
                    out = await loop.run_in_executor(executor, session.process_hands, msg.get("hands"))
                else:
                    data = msg.get("data")
                    if not isinstance(data, str):
                        continue
                    out = await loop.run_in_executor(executor, _process_image, session, data, int(now * 1000))
            except InvalidFrame as e:
                invalid += 1
                await ws.send_json({"type": "error", "detail": str(e)})
                continue
            except FileNotFoundError as e:
                logger.error("tracker unavailable: %s", e)
                await ws.send_json({"type": "error", "detail": str(e)})
                continue
            except ValueError:
                decode_err += 1
                continue
            steps += 1

            try:
                await ws.send_json({"type": "step", **out})
            except WebSocketDisconnect:
                alive = False
                break

            if DEBUG_WS and (now - last_debug) > 1.0:
                last_debug = now
                logger.info(
                    f"frames_in={frames_in} dropped={frames_dropped} "
                    f"invalid={invalid} decode_err={decode_err} "
                    f"steps={steps} stable={out['stable']} text={out['text']!r}"
                )

    except WebSocketDisconnect:
        pass
    finally:
        alive = False

        recv_task.cancel()
        ping_task.cancel()
        await asyncio.gather(recv_task, ping_task, return_exceptions=True)

        await loop.run_in_executor(executor, session.close)
        executor.shutdown(wait=False)
