"""HTTP control interface: status, navigation, photos, camera stream and OTA."""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Iterable, Iterator
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

MAX_JSON_BODY = 512
PHOTO_PREFIX = "/api/photos/"
STREAM_CONTENT_TYPE = "multipart/x-mixed-replace; boundary=frame"
STREAM_PART_HEADER = "\r\n--frame\r\nContent-Type: image/jpeg\r\nContent-Length: {}\r\n\r\n"
RESTART_DELAY_S = 0.5
FRAME_INTERVAL_S = 0.1

OK_BODY = b'{"ok":true}'
FAIL_BODY = b'{"ok":false}'

WEB_UI_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Pocket Pet</title>
<style>
body{font-family:sans-serif;background:#111;color:#eee;max-width:480px;margin:0 auto;padding:16px}
h2{font-size:.8em;color:#888;text-transform:uppercase;margin:16px 0 8px}
.grid{display:grid;grid-template-columns:repeat(4,1fr);gap:6px}
button{background:#333;color:#eee;border:none;border-radius:8px;padding:10px 4px;cursor:pointer}
#status span{color:#6cf;margin-right:12px}
img{max-width:100%}
</style>
</head>
<body>
<h1>Pocket Pet</h1>
<div id="status">Page <span id="s-page">-</span>WiFi <span id="s-wifi">-</span>AI <span id="s-ai">-</span></div>
<h2>Emotions</h2>
<div class="grid" id="emotions"></div>
<h2>Actions</h2>
<div class="grid" id="actions"></div>
<h2>Pages</h2>
<div class="grid" id="pages"></div>
<h2>Brightness / Volume / Sleep</h2>
<div class="grid" id="controls"></div>
<h2>Servo</h2>
<div class="grid" id="servo"></div>
<h2>Camera</h2>
<button onclick="stream(true)">Start preview</button> <button onclick="stream(false)">Stop</button>
<img id="stream" style="display:none">
<h2>Firmware update</h2>
<input type="file" id="ota" accept=".bin"> <button onclick="ota()">Upload</button> <span id="ota-msg"></span>
<h2>Photos</h2>
<div class="grid" id="photos"></div>
<script>
async function post(u,d){let r=await fetch(u,{method:'POST',headers:{'Content-Type':'application/json'},body:JSON.stringify(d)});return r.json()}
function buttons(id,items,fn){let g=document.getElementById(id);items.forEach(i=>{let b=document.createElement('button');b.textContent=i;b.onclick=()=>fn(i);g.appendChild(b)})}
buttons('emotions',['normal','happy','curious','shy','surprised','sleepy','thinking','sick'],e=>post('/api/emotion',{emotion:e}));
buttons('actions',['nod','shake','dance','wink'],a=>post('/api/action',{action:a}));
buttons('pages',['face','menu','camera','music','pomodoro','album','ai','system'],p=>post('/api/page',{page:p}).then(status));
buttons('controls',['dim','normal','bright'],l=>post('/api/brightness',{level:l}));
buttons('controls',['quiet','normal','loud'],l=>post('/api/volume',{level:l}));
buttons('controls',['sleep','wake'],a=>post('/api/sleep',{action:a}));
buttons('servo',['left','up','down','right','center','nod','shake','dance'],a=>post('/api/servo',{action:a}));
function stream(on){let i=document.getElementById('stream');i.src=on?'/api/stream':'';i.style.display=on?'block':'none'}
async function ota(){let f=document.getElementById('ota').files[0];if(!f)return;let m=document.getElementById('ota-msg');m.textContent='Uploading...';
try{let r=await fetch('/api/ota',{method:'POST',headers:{'Content-Type':'application/octet-stream'},body:f});let j=await r.json();m.textContent=j.msg}catch(e){m.textContent='Error'}}
async function del(n){if(!confirm('Delete?'))return;await fetch('/api/photos',{method:'DELETE',headers:{'Content-Type':'application/json'},body:JSON.stringify({name:n})});photos()}
async function photos(){try{let l=await (await fetch('/api/photos')).json();let g=document.getElementById('photos');g.innerHTML='';
l.forEach(n=>{let d=document.createElement('div');let i=document.createElement('img');i.src='/api/photos/'+n;let b=document.createElement('button');b.textContent='x';b.onclick=()=>del(n);d.appendChild(i);d.appendChild(b);g.appendChild(d)})}catch(e){}}
async function status(){try{let s=await (await fetch('/api/status')).json();
document.getElementById('s-page').textContent=s.page||'-';document.getElementById('s-wifi').textContent=s.wifi||'-';document.getElementById('s-ai').textContent=s.ai||'-'}catch(e){}}
status();photos();setInterval(status,5000);setInterval(photos,15000);
</script>
</body>
</html>
"""


class OtaError(Exception):
    """Raised by a firmware installer; the message is reported to the client."""


@dataclass
class WebControlCallbacks:
    """Hooks into the rest of the application; any of them may be left out."""

    get_status: Callable[[], str] | None = None
    navigate_page: Callable[[str], bool] | None = None
    set_brightness: Callable[[str], None] | None = None
    set_volume: Callable[[str], None] | None = None
    sleep_control: Callable[[str], None] | None = None
    servo_control: Callable[[str], bool] | None = None
    list_photos: Callable[[], str] | None = None
    get_photo: Callable[[str], bytes | None] | None = None
    delete_photo: Callable[[str], bool] | None = None
    capture_jpeg: Callable[[], bytes | None] | None = None
    release_jpeg: Callable[[bytes], None] | None = None
    on_ota_start: Callable[[], None] | None = None
    on_ota_end: Callable[[], None] | None = None
    install_firmware: Callable[[bytes], None] | None = None
    restart: Callable[[], None] | None = None
    get_face_state: Callable[[], str] | None = None
    set_emotion: Callable[[str], bool] | None = None
    do_action: Callable[[str], bool] | None = None


@dataclass
class WebResponse:
    """A response; body is bytes, or an iterable of chunks for streams."""

    status: int = 200
    content_type: str = "application/json"
    body: bytes | Iterable[bytes] = b""
    headers: dict[str, str] = field(default_factory=dict)
    on_sent: Callable[[], None] | None = None


def _json_response(body: bytes | str, status: int = 200) -> WebResponse:
    data = body.encode("utf-8") if isinstance(body, str) else body
    return WebResponse(status=status, content_type="application/json", body=data)


def _ok(flag: bool) -> WebResponse:
    return _json_response(OK_BODY if flag else FAIL_BODY)


def _ota_reply(ok: bool, msg: str) -> WebResponse:
    return _json_response(json.dumps({"ok": ok, "msg": msg}, separators=(",", ":")))


def _not_found() -> WebResponse:
    return WebResponse(status=404, content_type="text/plain", body=b"Not found")


def _json_field(body: bytes, key: str) -> str:
    """String value of a top-level JSON key, or "" when absent or unusable."""
    if not body or len(body) > MAX_JSON_BODY:
        return ""
    try:
        doc = json.loads(bytes(body).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return ""
    if not isinstance(doc, dict):
        return ""
    value = doc.get(key)
    return value if isinstance(value, str) else ""


class PetWebServer:
    """Routes control requests to callbacks and optionally serves them over HTTP."""

    def __init__(self, callbacks: WebControlCallbacks | None = None) -> None:
        self.callbacks = callbacks or WebControlCallbacks()
        self._frame_interval = FRAME_INTERVAL_S
        self._httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._routes: dict[tuple[str, str], Callable[[bytes], WebResponse]] = {
            ("GET", "/"): self._root,
            ("GET", "/api/status"): self._status,
            ("POST", "/api/page"): self._page,
            ("POST", "/api/brightness"): self._brightness,
            ("POST", "/api/volume"): self._volume,
            ("POST", "/api/sleep"): self._sleep,
            ("POST", "/api/servo"): self._servo,
            ("GET", "/api/photos"): self._photo_list,
            ("DELETE", "/api/photos"): self._photo_delete,
            ("GET", "/api/stream"): self._stream,
            ("POST", "/api/ota"): self._ota,
            ("GET", "/api/face"): self._face_state,
            ("POST", "/api/emotion"): self._emotion,
            ("POST", "/api/action"): self._action,
        }

    @property
    def port(self) -> int | None:
        """Port actually bound while running."""
        return self._httpd.server_address[1] if self._httpd else None

    def handle(self, method: str, path: str, body: bytes = b"") -> WebResponse:
        """Answer one request."""
        method = method.upper()
        route = urlsplit(path).path
        handler = self._routes.get((method, route))
        if handler is not None:
            return handler(body)
        if method == "GET" and route.startswith(PHOTO_PREFIX):
            return self._photo_get(unquote(route[len(PHOTO_PREFIX):]))
        if any(known == route for _, known in self._routes):
            return WebResponse(status=405, content_type="text/plain",
                               body=b"Method not allowed")
        return _not_found()

    def begin(self, port: int = 80, host: str = "0.0.0.0") -> bool:
        if self._httpd is not None:
            return True
        try:
            httpd = ThreadingHTTPServer((host, port), _make_handler(self))
        except OSError:
            logger.error("WebServer: start failed")
            return False
        httpd.daemon_threads = True
        self._httpd = httpd
        self._thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        self._thread.start()
        logger.info("WebServer: started on port %d", self.port)
        return True

    def stop(self) -> None:
        if self._httpd is None:
            return
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join()
        self._httpd = None
        self._thread = None
        logger.info("WebServer: stopped")

    def is_running(self) -> bool:
        return self._httpd is not None

    def _root(self, body: bytes) -> WebResponse:
        return WebResponse(content_type="text/html", body=WEB_UI_HTML.encode("utf-8"))

    def _status(self, body: bytes) -> WebResponse:
        cb = self.callbacks.get_status
        return _json_response(cb() if cb else "{}")

    def _page(self, body: bytes) -> WebResponse:
        cb = self.callbacks.navigate_page
        return _ok(bool(cb(_json_field(body, "page"))) if cb else False)

    def _brightness(self, body: bytes) -> WebResponse:
        if self.callbacks.set_brightness:
            self.callbacks.set_brightness(_json_field(body, "level"))
        return _ok(True)

    def _volume(self, body: bytes) -> WebResponse:
        if self.callbacks.set_volume:
            self.callbacks.set_volume(_json_field(body, "level"))
        return _ok(True)

    def _sleep(self, body: bytes) -> WebResponse:
        if self.callbacks.sleep_control:
            self.callbacks.sleep_control(_json_field(body, "action"))
        return _ok(True)

    def _servo(self, body: bytes) -> WebResponse:
        cb = self.callbacks.servo_control
        return _ok(bool(cb(_json_field(body, "action"))) if cb else False)

    def _photo_list(self, body: bytes) -> WebResponse:
        cb = self.callbacks.list_photos
        return _json_response(cb() if cb else "[]")

    def _photo_get(self, name: str) -> WebResponse:
        cb = self.callbacks.get_photo
        if not name or cb is None:
            return _not_found()
        data = cb(name)
        if data is None:
            return _not_found()
        return WebResponse(content_type="image/jpeg", body=bytes(data))

    def _photo_delete(self, body: bytes) -> WebResponse:
        cb = self.callbacks.delete_photo
        return _ok(bool(cb(_json_field(body, "name"))) if cb else False)

    def _stream(self, body: bytes) -> WebResponse:
        if self.callbacks.capture_jpeg is None:
            return WebResponse(status=500, content_type="text/plain",
                               body=b"Camera not available")
        return WebResponse(content_type=STREAM_CONTENT_TYPE,
                           body=self._stream_frames(),
                           headers={"Access-Control-Allow-Origin": "*"})

    def _stream_frames(self) -> Iterator[bytes]:
        cb = self.callbacks
        capture = cb.capture_jpeg
        assert capture is not None
        while True:
            frame = capture()
            if not frame:
                time.sleep(self._frame_interval)
                continue
            try:
                yield STREAM_PART_HEADER.format(len(frame)).encode("ascii")
                yield bytes(frame)
            finally:
                if cb.release_jpeg:
                    cb.release_jpeg(frame)
            time.sleep(self._frame_interval)

    def _ota(self, body: bytes) -> WebResponse:
        cb = self.callbacks
        if not body:
            return _ota_reply(False, "No data")
        if cb.on_ota_start:
            cb.on_ota_start()

        failure: str | None = None
        if cb.install_firmware is None:
            failure = "No OTA partition"
        else:
            try:
                cb.install_firmware(bytes(body))
            except OtaError as err:
                failure = str(err) or "Write failed"
            except OSError:
                failure = "Write failed"

        if failure is not None:
            if cb.on_ota_end:
                cb.on_ota_end()
            return _ota_reply(False, failure)

        response = _ota_reply(True, "Rebooting...")
        response.on_sent = cb.restart
        return response

    def _face_state(self, body: bytes) -> WebResponse:
        cb = self.callbacks.get_face_state
        return _json_response(cb() if cb else "{}")

    def _emotion(self, body: bytes) -> WebResponse:
        cb = self.callbacks.set_emotion
        return _ok(bool(cb(_json_field(body, "emotion"))) if cb else False)

    def _action(self, body: bytes) -> WebResponse:
        cb = self.callbacks.do_action
        return _ok(bool(cb(_json_field(body, "action"))) if cb else False)


def _make_handler(server: PetWebServer) -> type[BaseHTTPRequestHandler]:
    class _Handler(BaseHTTPRequestHandler):
        def _dispatch(self) -> None:
            try:
                length = int(self.headers.get("Content-Length") or 0)
            except ValueError:
                length = 0
            body = self.rfile.read(length) if length > 0 else b""
            response = server.handle(self.command, self.path, body)

            self.send_response(response.status)
            self.send_header("Content-Type", response.content_type)
            for name, value in response.headers.items():
                self.send_header(name, value)

            if isinstance(response.body, (bytes, bytearray)):
                self.send_header("Content-Length", str(len(response.body)))
                self.end_headers()
                self.wfile.write(response.body)
            else:
                self.close_connection = True
                self.end_headers()
                chunks = iter(response.body)
                try:
                    for chunk in chunks:
                        self.wfile.write(chunk)
                        self.wfile.flush()
                except OSError:
                    pass
                finally:
                    close = getattr(chunks, "close", None)
                    if close is not None:
                        close()

            if response.on_sent is not None:
                self.wfile.flush()
                threading.Timer(RESTART_DELAY_S, response.on_sent).start()

        do_GET = _dispatch
        do_POST = _dispatch
        do_DELETE = _dispatch

        def log_message(self, format: str, *args: object) -> None:
            logger.debug(format, *args)

    return _Handler