#!/usr/bin/env python3
"""
Seed a dev database with the starter journeys, courses and their prices.
Run from repo root: python scripts/seed-data.py
Uses DATABASE_URL from env or .env. Safe to re-run: existing slugs are skipped.
"""
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Repo root on path for shared and service imports
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root))

JOURNEYS = [
    {
        "slug": "logica-de-programacao",
        "title": "Lógica de Programação",
        "description": "Os primeiros passos: algoritmos, variáveis e estruturas de controlo.",
        "sort_order": 0,
        "courses": [
            {"slug": "portugol-studio", "title": "Portugol Studio", "category": "Lógica", "price": "500"},
        ],
    },
    {
        "slug": "desenvolvimento-web",
        "title": "Desenvolvimento Web",
        "description": "Construa páginas e aplicações para a web.",
        "sort_order": 1,
        "courses": [
            {"slug": "html", "title": "HTML", "category": "Front-end", "price": "1000"},
            {"slug": "css", "title": "CSS", "category": "Front-end", "price": "900"},
            {"slug": "javascript", "title": "JavaScript", "category": "Front-end", "price": "1500"},
        ],
    },
]


async def seed() -> None:
    from academy.catalog import service as catalog
    from academy.config import Settings
    from academy.exceptions import CourseNotFoundError
    from academy.payments import service as payments
    from shared.database.postgres import get_async_session_factory

    settings = Settings()
    session_factory = get_async_session_factory(settings.database_url)

    async with session_factory() as db:
        journeys = {j.slug: j for j, _ in await catalog.list_journeys_with_courses(db)}
        for entry in JOURNEYS:
            journey = journeys.get(entry["slug"])
            if journey is None:
                journey = await catalog.create_journey(
                    db,
                    title=entry["title"],
                    slug=entry["slug"],
                    description=entry["description"],
                    sort_order=entry["sort_order"],
                )
                print(f"Journey: {journey.slug}")

            for idx, course_entry in enumerate(entry["courses"]):
                try:
                    course = await catalog.get_course_by_slug(db, course_entry["slug"])
                except CourseNotFoundError:
                    course = await catalog.create_course(
                        db,
                        title=course_entry["title"],
                        slug=course_entry["slug"],
                        category=course_entry["category"],
                        journey_id=journey.journey_id,
                        sort_order=idx,
                    )
                    print(f"  Course: {course.slug}")
                await payments.update_course_payment_settings(
                    db,
                    course.course_id,
                    payment_enabled=True,
                    price=Decimal(course_entry["price"]),
                )
                print(f"  Price: {course.slug} = {course_entry['price']} {settings.currency}")
        await db.commit()


def main() -> None:
    try:
        asyncio.run(seed())
    except Exception as e:
        print(f"Seed error: {e}", file=sys.stderr)
        sys.exit(1)
    print("Seed done.")


if __name__ == "__main__":
    main()
