from dataclasses import replace

from fastapi.testclient import TestClient

from taskmaster.app.main import create_app
from taskmaster.services.debug import DEMO_TASKS, DebugConsole


def test_demo_data(store):
    console = DebugConsole(store)
    assert console.add_demo_data() == 4
    texts = [t.text for t in store.tasks]
    assert texts == list(reversed(DEMO_TASKS))
    assert [t.completed for t in store.tasks] == [False, True, False, False]


def test_get_tasks_and_stats(store):
    console = DebugConsole(store)
    store.add_task("a")
    records = console.get_tasks()
    assert records == [store.tasks[0].to_record()]
    assert console.get_stats() == store.get_stats()


def test_clear_requires_confirmation(store):
    console = DebugConsole(store)
    store.add_task("a")
    assert console.clear_all() is False
    assert len(store.tasks) == 1
    assert console.clear_all(confirm=True) is True
    assert store.tasks == []


def test_debug_routes(settings, store):
    client = TestClient(create_app(replace(settings, debug_api=True), store=store))

    assert client.post("/api/debug/demo").json() == {"added": 4}
    assert client.get("/api/debug/stats").json() == {"total": 4, "completed": 1, "active": 3}
    assert [r["text"] for r in client.get("/api/debug/tasks").json()][0] == "Sport treiben"

    assert client.post("/api/debug/clear").json() == {"cleared": False}
    assert client.post("/api/debug/clear", params={"confirm": "true"}).json() == {"cleared": True}
    assert store.tasks == []
