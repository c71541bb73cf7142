"""
The smoke checks behind ``manage.py verify-flow`` / ``verify-appointment``
should pass against a clean store and leave no rows behind.
"""

from sqlalchemy import func, select

from kiliniks.db.base import Appointment, Flow, Location, SalesItem, Stage
from kiliniks.verification import verify_appointment, verify_flow


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


def test_verify_flow_passes_and_cleans_up(db_session):
    results = verify_flow(db_session)

    assert results
    assert all(passed for _, passed in results), results
    for model in (Flow, Location, Stage, SalesItem):
        assert _count(db_session, model) == 0


def test_verify_appointment_passes_and_cleans_up(db_session):
    results = verify_appointment(db_session)

    assert all(passed for _, passed in results), results
    assert _count(db_session, Appointment) == 0
