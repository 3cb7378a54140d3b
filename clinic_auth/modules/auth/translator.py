"""Maps Supabase Auth error messages to the pt-BR text shown to users."""
from typing import Dict, Optional

AUTH_ERROR_MESSAGES: Dict[str, str] = {
    "Invalid login credentials": "E-mail ou senha incorretos",
    "Email not confirmed": "E-mail não confirmado. Verifique sua caixa de entrada.",
    "User already registered": "Este e-mail já está cadastrado",
    "Password should be at least 6 characters": "A senha deve ter no mínimo 6 caracteres",
    "Email rate limit exceeded": "Muitas tentativas. Aguarde alguns minutos e tente novamente.",
}

DEFAULT_ERROR_MESSAGE = "Ocorreu um erro inesperado. Tente novamente."
NOT_AUTHENTICATED_MESSAGE = "Usuário não autenticado"


class ErrorTranslator:
    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self.messages = AUTH_ERROR_MESSAGES if messages is None else messages

    def translate(self, message: Optional[str]) -> str:
        """Localized text for a known provider message, otherwise the message itself."""
        if not message:
            return DEFAULT_ERROR_MESSAGE
        return self.messages.get(message, message)

    def translate_exception(self, exc: BaseException) -> str:
        message = getattr(exc, "message", None) or str(exc)
        return self.translate(message)
