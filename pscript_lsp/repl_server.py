from __future__ import annotations

"""
Simple TCP REPL server for pscript.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "1 2 add"}
- Response: {"ok": true, "stack": ["Number(3)"], "capturing": false}
            or {"ok": false, "error": "/stackunderflow in add"}
- Request: {"cmd": "reset"} starts a fresh session.

A single Interpreter is kept alive so definitions and the operand stack
persist across requests. Requests are serialised with a lock because
sessions are not shareable between threads.
"""

import json
import logging
import socket
import threading
from typing import Tuple

from pscript.config import get_log_level, get_repl_address
from pscript.errors import PSError
from pscript.interpreter import Interpreter

logger = logging.getLogger(__name__)


class ReplServer:
    def __init__(self, host: str | None = None, port: int | None = None):
        default_host, default_port = get_repl_address()
        self.host = host or default_host
        self.port = port or default_port
        # Keep a single interpreter to maintain session state
        self.interp = Interpreter()
        self._lock = threading.Lock()

    def handle_request(self, req: dict) -> dict:
        cmd = req.get("cmd")
        with self._lock:
            if cmd == "eval":
                code = req.get("code", "")
                if not isinstance(code, str):
                    return {"ok": False, "error": f"Invalid request: code must be a string, got {code!r}"}
                try:
                    self.interp.eval(code)
                except PSError as ex:
                    return {"ok": False, "error": str(ex)}
                return {
                    "ok": True,
                    "stack": [repr(v) for v in self.interp.stack],
                    "capturing": self.interp.capturing,
                }
            if cmd == "reset":
                self.interp = Interpreter()
                return {"ok": True, "stack": [], "capturing": False}
        return {"ok": False, "error": f"Unknown cmd: {cmd}"}

    def handle_line(self, line: bytes) -> dict:
        try:
            req = json.loads(line.decode("utf-8"))
            if not isinstance(req, dict):
                raise ValueError("request must be a JSON object")
        except (ValueError, UnicodeDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        return self.handle_request(req)

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("pscript REPL listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.debug("client connected: %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    resp = self.handle_line(line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.debug("client disconnected: %s:%d", *addr)


def main():
    logging.basicConfig(level=get_log_level())
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()
