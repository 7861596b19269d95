"""
Vercel Python Function for taper plan generation.

POST /api/taper/generate with the doses, optional constraint ranges and
optional schedule settings. The response is {"id", "plan"} on success or
{"error"} with a 4xx/5xx status.
"""

from http.server import BaseHTTPRequestHandler
import json
import sys
from pathlib import Path

# Add the _python directory to the Python path for importing the taper module
sys.path.insert(0, str(Path(__file__).parent.parent / "_python"))

from taper_tools import MAX_BODY_SIZE, plan_response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class handler(BaseHTTPRequestHandler):
    """HTTP handler for Vercel Python Functions."""

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", 0))
        # Read at most one byte past the limit so oversized bodies are still detected
        body = self.rfile.read(min(content_length, MAX_BODY_SIZE + 1))
        status, payload = plan_response(body)

        response = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(response)))
        self._send_cors_headers()
        self.wfile.write(response)

    def do_OPTIONS(self):
        """CORS preflight."""
        self.send_response(204)
        self._send_cors_headers()

    def _send_cors_headers(self):
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.end_headers()
