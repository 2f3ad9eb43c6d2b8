"""
Verify backend wiring: imports, post graph, storage round trip, and optionally one real Gemini post.
Run: python check_backend.py [--live]
"""
import asyncio
import sys


def check(name: str, fn):
    try:
        fn()
        print(f"  OK  {name}")
        return True
    except Exception as e:
        print(f"  FAIL {name}: {e}")
        return False


def main_sync(live: bool = False):
    print("1. Imports (config, models, services, workflow, studio, routes)...")
    ok = True
    ok &= check("config", lambda: __import__("medisocial.config"))
    ok &= check("models (schemas + db_models)", lambda: __import__("medisocial.models.schemas") or __import__("medisocial.models.db_models"))
    ok &= check("services (gemini, pubmed, persistence, rts)", lambda: __import__("medisocial.services"))
    ok &= check("workflow (coordinators, merger, bridge, view)", lambda: __import__("medisocial.workflow"))
    ok &= check("studio + routes", lambda: __import__("medisocial.studio") or __import__("medisocial.routes"))
    ok &= check("main app", lambda: __import__("medisocial.main"))
    if not ok:
        return 1

    print("\n2. LangGraph compile...")
    try:
        from medisocial.services import GeminiService
        from medisocial.workflow.graph import create_post_graph

        create_post_graph(GeminiService())
        print("  OK  Graph compiled")
    except Exception as e:
        print(f"  FAIL Graph: {e}")
        return 1

    async def run_async_checks():
        from medisocial.models.db_models import create_tables, dispose_db, init_db
        from medisocial.services import PersistenceStore, SqlKeyValueMedium

        print("\n3. Storage (DATABASE_URL)...")
        factory = init_db()
        await create_tables()
        store = PersistenceStore(SqlKeyValueMedium(factory))
        state = await store.load()
        print(f"  OK  Loaded {len(state.history)} history entries; draft present: {state.draft is not None}")

        if live:
            print("\n4. One post through Gemini (requires GEMINI_API_KEY)...")
            from medisocial.models.schemas import PostRequest
            from medisocial.services import GeminiService
            from medisocial.studio import Studio

            studio = Studio(GeminiService(), store)
            await studio.start()
            result = await studio.post.submit(PostRequest(topic="Lesão do LCA em corredores"))
            print(f"  OK  Post generated: {result.content.headline!r}")
        await dispose_db()

    try:
        asyncio.run(run_async_checks())
    except Exception as e:
        print(f"  FAIL: {e}")
        return 1

    print("\nBackend check done.")
    return 0


if __name__ == "__main__":
    sys.exit(main_sync(live="--live" in sys.argv))
