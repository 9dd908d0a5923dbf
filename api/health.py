"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json
from src.utils.config import AppConfig


def integration_status(config: AppConfig) -> dict:
    """Which optional integrations have credentials configured."""
    return {
        "supabase": bool(config.supabase_url and config.supabase_service_role_key),
        "geocoding": bool(config.google_maps_api_key),
        "places": bool(config.google_maps_api_key),
        "scraper": config.scrape_provider != "none",
        "vision": bool(config.vision_api_key),
        "editorial": config.editorial_backend,
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        """Handle GET request."""
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        response = json.dumps({
            "status": "ok",
            "service": "rumoo-backend",
            "integrations": integration_status(AppConfig.from_env()),
        })
        self.wfile.write(response.encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
