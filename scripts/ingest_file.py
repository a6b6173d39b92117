import argparse
import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from classroom_content.content.parser import GeminiContentParser
from classroom_content.db import AsyncSessionLocal, ContentStore, create_schema
from classroom_content.llm.client import LLMClient


async def main(args: argparse.Namespace) -> None:
    with open(args.path, encoding="utf-8") as fh:
        text = fh.read()

    if not text.strip():
        print(f"{args.path} is empty, nothing to ingest.")
        return

    await create_schema()

    print(f"Parsing {args.path} ({len(text)} chars)...")
    parser = GeminiContentParser(LLMClient())
    batch = await parser.parse(text, subject=args.subject, topic=args.chapter)

    for subject in batch.subjects:
        for chapter in subject.chapters:
            print(f"  {subject.title} / {chapter.title}: {len(chapter.topics)} topic(s)")

    async with AsyncSessionLocal() as session:
        store = ContentStore(session)
        try:
            if args.create:
                await store.create_classroom(args.classroom, args.create)
            result = await store.ingest(args.classroom, batch)
            await store.commit()
        except Exception:
            await session.rollback()
            raise

    print(f"Done! Ingested {len(result.records)} topic(s) into '{args.classroom}'.")
    for record in result.records:
        print(f"  {record.id}  {record.topic_title}")


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Parse a text file with Gemini and ingest it into a classroom.")
    ap.add_argument("classroom", help="Classroom slug")
    ap.add_argument("path", help="Plain-text file to ingest")
    ap.add_argument("--subject", help="Subject title, if already known")
    ap.add_argument("--chapter", help="Chapter title, if already known (requires --subject)")
    ap.add_argument("--create", metavar="NAME", help="Create the classroom with this name first")
    asyncio.run(main(ap.parse_args()))
