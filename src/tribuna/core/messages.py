"""User-facing API error messages.

Messages are Portuguese-first. Only the choice-limit message varies with the
topic language, since it is the one shown next to topic content.
"""

UNAUTHORIZED = "Não autorizado"
FORBIDDEN = "Sem permissão"
INVALID_DATA = "Dados inválidos"
INTERNAL_ERROR = "Erro interno do servidor"

TOPIC_NOT_FOUND = "Tema não encontrado"
TOPIC_LOCKED_FOR_VOTING = "Este tema está bloqueado para votação"
TOPIC_LOCKED_FOR_COMMENTS = "Este tema está bloqueado para novos comentários"
INVALID_OPTIONS = "Opções inválidas"
VOTE_ERROR = "Erro ao votar"
VOTE_REMOVE_ERROR = "Erro ao remover voto"

COMMENT_NOT_FOUND = "Comentário não encontrado"
PARENT_NOT_FOUND = "Comentário pai não encontrado"
COMMENT_REMOVED = "Comentário removido"
COMMENT_NOT_EDITABLE = "Este comentário já não pode ser editado"
COMMENTS_FETCH_ERROR = "Erro ao buscar comentários"
CANNOT_VOTE_OWN_COMMENT = "Você não pode votar no seu próprio comentário"
SIDE_NOT_ALLOWED = "Este tema não aceita lados"
OPTION_NOT_ALLOWED = "Este tema não tem opções"

USER_NOT_FOUND = "Utilizador não encontrado"
PROFILE_FETCH_ERROR = "Erro ao carregar perfil do utilizador"

_CHOICE_LIMIT = {
    "pt": ("Você pode selecionar no máximo {n} opção", "Você pode selecionar no máximo {n} opções"),
    "en": ("You can select at most {n} option", "You can select at most {n} options"),
    "es": ("Puedes seleccionar como máximo {n} opción", "Puedes seleccionar como máximo {n} opciones"),
}


def choice_limit(max_choices: int, language: str | None = None) -> str:
    """Return the pluralized choice-limit message for ``language``."""
    singular, plural = _CHOICE_LIMIT.get((language or "pt").lower()[:2], _CHOICE_LIMIT["pt"])
    template = singular if max_choices == 1 else plural
    return template.format(n=max_choices)
