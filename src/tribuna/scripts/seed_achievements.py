"""Insert the achievement catalogue, leaving existing rows untouched."""

from __future__ import annotations

from sqlalchemy.orm import Session

from tribuna.db.session import SessionLocal
from tribuna.models import Achievement

ACHIEVEMENTS: list[tuple[str, str, str]] = [
    ("first_vote", "Primeiro voto", "Votou no primeiro tema"),
    ("active_voter", "Eleitor ativo", "Votou em 10 temas"),
    ("voting_enthusiast", "Entusiasta do voto", "Votou em 50 temas"),
    ("debate_starter", "Iniciador de debates", "Criou o primeiro tema"),
    ("topic_creator", "Criador de temas", "Criou 5 temas"),
    ("debate_master", "Mestre do debate", "Criou 20 temas"),
    ("first_comment", "Primeiro argumento", "Publicou o primeiro comentário"),
    ("active_commenter", "Comentador ativo", "Publicou 10 comentários"),
    ("discussion_expert", "Especialista em discussão", "Publicou 50 comentários"),
    ("discussion_master", "Mestre da discussão", "Publicou 100 comentários"),
    ("karma_100", "Karma 100", "Alcançou 100 pontos de karma"),
    ("karma_500", "Karma 500", "Alcançou 500 pontos de karma"),
    ("karma_1000", "Karma 1000", "Alcançou 1000 pontos de karma"),
]


def seed_achievements(db: Session) -> int:
    """Insert missing achievements and return how many were added."""
    existing = {key for (key,) in db.query(Achievement.key)}
    added = 0
    for key, name, description in ACHIEVEMENTS:
        if key in existing:
            continue
        db.add(Achievement(key=key, name=name, description=description))
        added += 1
    db.commit()
    return added


if __name__ == "__main__":
    with SessionLocal() as session:
        count = seed_achievements(session)
    print(f"Seeded {count} achievement(s)")
