"""Skill lookup and creation."""

from typing import Iterable, Sequence
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.talent import Skill, categorize_skill

logger = logging.getLogger(__name__)


def unique_names(names: Iterable[str]) -> list[str]:
    """Strip names and drop blanks and duplicates, keeping first occurrence order."""
    seen: list[str] = []
    for name in names:
        cleaned = name.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


async def get_skills_by_name(db: AsyncSession, names: Sequence[str]) -> dict[str, Skill]:
    if not names:
        return {}
    result = await db.execute(select(Skill).where(Skill.name.in_(list(names))))
    return {skill.name: skill for skill in result.scalars().all()}


async def get_or_create_skills(db: AsyncSession, names: Iterable[str]) -> list[Skill]:
    """
    Return a Skill for each name, creating missing ones.

    New skills are categorized by the static BOH/FOH lists. The session is
    flushed so new skills have ids, but not committed.
    """
    wanted = unique_names(names)
    existing = await get_skills_by_name(db, wanted)

    skills = []
    for name in wanted:
        skill = existing.get(name)
        if skill is None:
            skill = Skill(name=name, category=categorize_skill(name))
            db.add(skill)
            logger.info(f"Created skill {name!r} ({skill.category.value})")
        skills.append(skill)

    await db.flush()
    return skills


async def resolve_skill_ids(
    db: AsyncSession,
    names: Iterable[str],
) -> tuple[list[int], bool]:
    """
    Resolve skill names to ids without creating anything.

    Returns:
        Tuple of (resolved ids, whether every requested name resolved)
    """
    wanted = unique_names(names)
    found = await get_skills_by_name(db, wanted)
    ids = [found[name].id for name in wanted if name in found]
    return ids, len(found) == len(wanted)
