"""Tests for agent job queries."""
from unittest.mock import MagicMock

from ..job_queries import fetch_jobs
from .supabase_fakes import make_client


class TestJobs:
    def test_jobs_carry_their_task_name(self):
        client = make_client({"jobs": [
            {"id": "j1", "task_id": "t1", "agent_id": "a1", "profile_id": "p1", "status": "completed",
             "tasks": {"name": "Daily summary"}},
            {"id": "j2", "task_id": "t2", "agent_id": "a1", "profile_id": "p1", "status": "failed",
             "error": "timeout", "tasks": None},
        ]})

        jobs = fetch_jobs("a1", "p1", client)

        assert [(job.id, job.task_name) for job in jobs] == [("j1", "Daily summary"), ("j2", None)]
        assert jobs[1].error == "timeout"
        query = client.queries["jobs"][0]
        query.eq.assert_any_call("agent_id", "a1")
        query.eq.assert_any_call("profile_id", "p1")
        query.is_.assert_called_once_with("task_id", "null")
        query.order.assert_called_once_with("created_at", desc=True)

    def test_missing_ids_skip_the_query(self):
        client = make_client({})
        assert fetch_jobs("a1", None, client) == []
        assert fetch_jobs(None, "p1", client) == []
        client.table.assert_not_called()

    def test_errors_give_empty_list(self):
        client = MagicMock()
        client.table.side_effect = RuntimeError("db down")
        assert fetch_jobs("a1", "p1", client) == []
