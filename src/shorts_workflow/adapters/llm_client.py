"""
Unified LLM client with fallback support
Priority: Gemini → OpenRouter → Ollama
All API keys read from environment / config (no secrets in code).
"""

import threading
import time
from typing import Any, Dict, List, Optional

import ollama
import requests

from shorts_workflow import config


class LLMError(Exception):
    """Every configured provider failed for one prompt."""


class LLMClient:
    """Unified LLM client with fallback support"""

    def __init__(
        self,
        *,
        gemini_api_key: Optional[str] = None,
        openrouter_api_key: Optional[str] = None,
        ollama_base_url: Optional[str] = None,
        ollama_model: Optional[str] = None,
        timeout: float = config.LLM_REQUEST_TIMEOUT_SECONDS,
        probe: bool = True,
    ):
        self.timeout = timeout
        self.providers: List[str] = []
        self.current_provider: Optional[str] = None
        self._lock = threading.Lock()

        # Priority 1: Gemini (set GEMINI_API_KEY in .env)
        self.gemini_config = {
            "model": config.GEMINI_MODEL,
            "temperature": 0.7,
            "api_key": gemini_api_key if gemini_api_key is not None else config.GEMINI_API_KEY,
            "base_url": "https://generativelanguage.googleapis.com/v1beta/models",
        }

        # Priority 2: OpenRouter (set OPENROUTER_API_KEY in .env)
        self.openrouter_config = {
            "model": config.OPENROUTER_MODEL,
            "temperature": 0.7,
            "api_key": openrouter_api_key if openrouter_api_key is not None else config.OPENROUTER_API_KEY,
            "base_url": "https://openrouter.ai/api/v1",
        }

        # Priority 3: Ollama (fallback; local)
        self.ollama_config = {
            "base_url": ollama_base_url or config.OLLAMA_BASE_URL,
            "model": ollama_model or config.OLLAMA_MODEL,
        }

        if probe:
            self._initialize_providers()

    def _initialize_providers(self) -> None:
        """Pick the first available provider in priority order."""
        if self._test_gemini():
            self.providers.append("gemini")
        if self._test_openrouter():
            self.providers.append("openrouter")
        if self._test_ollama():
            self.providers.append("ollama")

        if self.providers:
            self.current_provider = self.providers[0]
            print(f"  ✅ Using {self.current_provider} for generation")
        else:
            print("  ⚠️  No LLM providers available! Stories will use fallback content.")

    def _test_gemini(self) -> bool:
        """Test if Gemini is available (requires GEMINI_API_KEY in .env)."""
        if not (self.gemini_config.get("api_key") or "").strip():
            return False
        try:
            url = f"{self.gemini_config['base_url']}/{self.gemini_config['model']}:generateContent"
            data = {
                "contents": [{"parts": [{"text": "test"}]}],
                "generationConfig": {"temperature": 0.1, "maxOutputTokens": 10},
            }
            response = requests.post(url, params={"key": self.gemini_config["api_key"]}, json=data, timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False

    def _test_openrouter(self) -> bool:
        """Test if OpenRouter is available (requires OPENROUTER_API_KEY in .env)."""
        if not (self.openrouter_config.get("api_key") or "").strip():
            return False
        try:
            response = requests.get(
                f"{self.openrouter_config['base_url']}/models",
                headers={"Authorization": f"Bearer {self.openrouter_config['api_key']}"},
                timeout=5,
            )
            return response.status_code == 200
        except requests.RequestException:
            return False

    def _test_ollama(self) -> bool:
        """Test if Ollama is available; switch to any installed model if the configured one is missing."""
        try:
            client = ollama.Client(host=self.ollama_config["base_url"])
            models = client.list()
            names = [m.get("model") or m.get("name") for m in models.get("models", [])]
        except Exception:
            return False
        if self.ollama_config["model"] in names:
            return True
        if names:
            self.ollama_config["model"] = names[0]
            return True
        return False

    def generate(
        self, prompt: str, options: Optional[Dict[str, Any]] = None, deadline: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Generate response using current provider, falling back through the others.
        `deadline` is a time.monotonic() value; each request's timeout is cut to
        what is left of it, and no provider is tried once it has passed.
        Returns: {"response": str, "provider": str}
        Raises LLMError when every provider fails.
        """
        options = options or {}
        with self._lock:
            current = self.current_provider
        order = list(self.providers)
        if current in order:
            order.remove(current)
            order.insert(0, current)

        generators = {
            "gemini": self._generate_gemini,
            "openrouter": self._generate_openrouter,
            "ollama": self._generate_ollama,
        }
        for provider in order:
            timeout = self.timeout
            if deadline is not None:
                timeout = min(timeout, deadline - time.monotonic())
                if timeout <= 0:
                    raise LLMError("Generation deadline passed")
            result = generators[provider](prompt, options, timeout)
            if result:
                with self._lock:
                    self.current_provider = provider
                return result

        raise LLMError("All LLM providers failed" if order else "No LLM providers available")

    def _generate_gemini(
        self, prompt: str, options: Dict[str, Any], timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """Generate using Gemini REST API"""
        try:
            url = f"{self.gemini_config['base_url']}/{self.gemini_config['model']}:generateContent"
            data = {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": options.get("temperature", self.gemini_config["temperature"]),
                    "maxOutputTokens": options.get("num_predict", 512),
                },
            }
            response = requests.post(
                url, params={"key": self.gemini_config["api_key"]}, json=data, timeout=timeout or self.timeout
            )
            if response.status_code != 200:
                print(f"  ⚠️  Gemini returned HTTP {response.status_code}")
                return None
            candidates = response.json().get("candidates") or [{}]
            parts = candidates[0].get("content", {}).get("parts", [])
            text = "".join(part.get("text", "") for part in parts)
            return {"response": text, "provider": "gemini"} if text else None
        except (requests.RequestException, ValueError) as e:
            print(f"  ⚠️  Gemini error: {e}")
            return None

    def _generate_openrouter(
        self, prompt: str, options: Dict[str, Any], timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """Generate using OpenRouter"""
        try:
            url = f"{self.openrouter_config['base_url']}/chat/completions"
            headers = {
                "Authorization": f"Bearer {self.openrouter_config['api_key']}",
                "Content-Type": "application/json",
            }
            data = {
                "model": self.openrouter_config["model"],
                "messages": [{"role": "user", "content": prompt}],
                "temperature": options.get("temperature", self.openrouter_config["temperature"]),
                "max_tokens": min(options.get("num_predict", 512), 4096),
            }
            response = requests.post(url, headers=headers, json=data, timeout=timeout or self.timeout)
            if response.status_code != 200:
                print(f"  ⚠️  OpenRouter returned HTTP {response.status_code}")
                return None
            result = response.json()
            text = (result.get("choices") or [{}])[0].get("message", {}).get("content", "")
            return {"response": text, "provider": "openrouter"} if text else None
        except (requests.RequestException, ValueError) as e:
            print(f"  ⚠️  OpenRouter error: {e}")
            return None

    def _generate_ollama(
        self, prompt: str, options: Dict[str, Any], timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """Generate using Ollama"""
        try:
            client = ollama.Client(host=self.ollama_config["base_url"], timeout=timeout or self.timeout)
            response = client.generate(
                model=self.ollama_config["model"],
                prompt=prompt,
                options={
                    "temperature": options.get("temperature", 0.7),
                    "num_predict": options.get("num_predict", 512),
                },
            )
            text = response.get("response", "")
            return {"response": text, "provider": "ollama"} if text else None
        except Exception as e:
            print(f"  ⚠️  Ollama error: {e}")
            return None
