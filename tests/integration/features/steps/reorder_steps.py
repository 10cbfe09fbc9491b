"""Step definitions for question reordering scenarios.

Questions are referred to by label; ``context.questions`` maps each label to
the id the API assigned on creation.
"""

from __future__ import annotations

import logging
from typing import Any, List

from behave import given, then, when

logger = logging.getLogger(__name__)


def _labels(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _label_for(context: Any, question_id: int) -> str:
    for label, qid in context.questions.items():
        if qid == question_id:
            return label
    return f"#{question_id}"


@given('the "{category}" category holds questions "{labels}"')
def step_create_questions(context: Any, category: str, labels: str) -> None:
    for label in _labels(labels):
        resp = context.client.post(
            "/api/questions",
            json={
                "category": category,
                "question_text": f"Question {label}",
                "question_type": "Yes/No",
                "answer_type": "boolean",
                "max_points": 1,
            },
        )
        assert resp.status_code == 201, resp.text
        context.questions[label] = int(resp.json()["id"])


@given('question "{label}" has been deleted')
def step_delete_question(context: Any, label: str) -> None:
    resp = context.client.delete(f"/api/questions/{context.questions[label]}")
    assert resp.status_code == 200, resp.text


@when('I drop "{moved}" after "{target}"')
def step_drop_after(context: Any, moved: str, target: str) -> None:
    context.response = context.client.post(
        "/api/questions/reorder",
        json={
            "moved_id": context.questions[moved],
            "target": {"kind": "afterItem", "item_id": context.questions[target]},
        },
    )


@when('I drop "{moved}" at the start')
def step_drop_at_start(context: Any, moved: str) -> None:
    context.response = context.client.post(
        "/api/questions/reorder",
        json={"moved_id": context.questions[moved], "target": {"kind": "start"}},
    )


@then("the response status is {status:d}")
def step_status(context: Any, status: int) -> None:
    assert context.response.status_code == status, context.response.text


@then('the problem code is "{code}"')
def step_problem_code(context: Any, code: str) -> None:
    assert context.response.headers["content-type"].startswith("application/problem+json")
    assert context.response.json().get("code") == code, context.response.text


@then('the "{category}" category is ordered "{labels}"')
def step_category_order(context: Any, category: str, labels: str) -> None:
    resp = context.client.get("/api/questions", params={"category": category})
    assert resp.status_code == 200, resp.text
    rows = resp.json()["questions"]
    actual = [_label_for(context, int(q["id"])) for q in rows]
    logger.info("category=%s order=%s", category, actual)
    assert actual == _labels(labels), actual
    assert [q["question_order"] for q in rows] == list(range(1, len(rows) + 1))


@then('the reported changes are "{expected}"')
def step_changes(context: Any, expected: str) -> None:
    changes = [
        f"{_label_for(context, int(c['id']))}={c['question_order']}" for c in context.response.json()["changes"]
    ]
    assert changes == _labels(expected), changes


@then("no position changes are reported")
def step_no_changes(context: Any) -> None:
    assert context.response.json()["changes"] == [], context.response.text
