"""
Text-generation collaborator (Gemini REST API over httpx).

Two uses in the storefront:
- a short WhatsApp welcome greeting for a business
- a screening verdict ``{"valid": bool, "reason": str}`` for a payment proof

The collaborator is optional. Without an API key the deterministic fallbacks
below are returned, and a failing call is logged and answered with a
fallback too. Nothing here raises to callers.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

EMPTY_REPLY_GREETING = "Welcome! How can we assist you today?"
NO_KEY_VERDICT = {"valid": True, "reason": "Mock validation: API Key missing."}
FAILED_VERDICT = {"valid": False, "reason": "AI Analysis failed to run."}


def templated_greeting(business_name: str, description: str) -> str:
    return f"Welcome to {business_name}! We offer {description}. How can we help?"


def fallback_greeting(business_name: str) -> str:
    return f"Welcome to {business_name}! How can we help you today?"


def create_welcome_prompt(business_name: str, description: str) -> str:
    return f"""
Act as a professional WhatsApp Business Assistant for a company named "{business_name}".
The business does the following: "{description}".

Write a short, engaging, and professional welcome message for a new customer initiating a chat.
Include a placeholder for the customer's name.
Keep it under 50 words.
Do not use hashtags.
""".strip()


def create_proof_prompt(image_ref: str) -> str:
    return f"""
I have received a payment proof image at: {image_ref}
Check if it contains a transaction ID, date, and amount.
Return a JSON object with a "valid" boolean and a "reason" string.
""".strip()


def extract_text(payload: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate of a generateContent response."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()


def extract_json_from_response(text: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from model output, tolerating ```json fences."""
    if not text:
        return None
    fenced = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", text, re.DOTALL)
    candidate = fenced.group(1) if fenced else text
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


class TextGenerator:
    """Thin client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-3-flash-preview",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout, connect=10.0)
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _generate(self, prompt: str, json_mode: bool = False) -> str:
        body: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if json_mode:
            body["generationConfig"] = {"responseMimeType": "application/json"}

        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=body,
            )
            response.raise_for_status()
            return extract_text(response.json())

    def generate_welcome_message(self, business_name: str, description: str) -> str:
        if not self.enabled:
            return templated_greeting(business_name, description)
        try:
            text = self._generate(create_welcome_prompt(business_name, description))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Welcome message generation failed: {e}")
            return fallback_greeting(business_name)
        return text or EMPTY_REPLY_GREETING

    def analyze_payment_proof(self, image_ref: str) -> Dict[str, Any]:
        if not self.enabled:
            return dict(NO_KEY_VERDICT)
        try:
            text = self._generate(create_proof_prompt(image_ref), json_mode=True)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Payment proof analysis failed: {e}")
            return dict(FAILED_VERDICT)

        parsed = extract_json_from_response(text)
        if parsed is None or "valid" not in parsed:
            logger.warning("Payment proof analysis returned no verdict")
            return dict(FAILED_VERDICT)
        return {
            "valid": parsed.get("valid") is True,
            "reason": str(parsed.get("reason") or ""),
        }
