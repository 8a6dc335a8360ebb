from __future__ import annotations

import random

from crewtrack.apps.compliance.enums import StatusLabel
from crewtrack.apps.compliance.ordering import (
    compare_records,
    sort_by_urgency,
    sort_for_list,
    urgency_bucket,
)
from crewtrack.apps.compliance.status import classify


def test_overdue_then_due_soon_then_complete(make_record):
    complete = make_record(crew_name="Ava")
    due = make_record(due_in=2, crew_name="Ben")
    overdue = make_record(overdue=5, crew_name="Cy")

    ordered = sort_by_urgency([complete, due, overdue])

    assert [classify(r) for r in ordered] == [
        StatusLabel.OVERDUE,
        StatusLabel.DUE_SOON,
        StatusLabel.COMPLETE,
    ]


def test_more_overdue_sorts_first(make_record):
    five = make_record(overdue=5, crew_name="Ava")
    ten = make_record(overdue=10, crew_name="Zed")

    assert sort_by_urgency([five, ten]) == [ten, five]
    assert compare_records(ten, five) == -1
    assert compare_records(five, ten) == 1


def test_sooner_due_sorts_first_and_missing_distance_sorts_last(make_record):
    later = make_record(due_in=9, crew_name="Ava")
    sooner = make_record(due_in=1, crew_name="Zed")
    unknown = make_record(due_in=0, days_until_due=None, crew_name="Aaron")

    assert sort_by_urgency([unknown, later, sooner]) == [sooner, later, unknown]


def test_missing_overdue_distance_is_least_urgent_overdue(make_record):
    known = make_record(overdue=1, crew_name="Zed")
    unknown = make_record(overdue=0, days_overdue=None, crew_name="Aaron")
    due = make_record(due_in=0)

    assert sort_by_urgency([unknown, due, known]) == [known, unknown, due]


def test_other_statuses_share_a_bucket_and_tie_break_by_name(make_record):
    never = make_record(never_expires=True, crew_name="Cora")
    missing = make_record(never_completed=True, crew_name="Abe")
    done = make_record(crew_name="Bea")

    assert {urgency_bucket(r) for r in (never, missing, done)} == {2}
    assert sort_by_urgency([never, done, missing]) == [missing, done, never]


def test_tie_break_chain_crew_track_training(make_record):
    a = make_record(crew_name="Kim", track_name="Audio", training_name="Zip line")
    b = make_record(crew_name="Kim", track_name="Audio", training_name="Arc flash")
    c = make_record(crew_name="Kim", track_name="Props", training_name="Arc flash")
    d = make_record(crew_name="jo", track_name="Video", training_name="Arc flash")

    assert sort_by_urgency([a, b, c, d]) == [d, b, a, c]


def test_name_compare_ignores_case_and_accents(make_record):
    zoe = make_record(crew_name="Zoë")
    eli = make_record(crew_name="éli")
    bob = make_record(crew_name="bob")

    assert sort_by_urgency([zoe, eli, bob]) == [bob, eli, zoe]


def test_sort_is_idempotent_and_stable(make_record):
    records = [
        make_record(overdue=3, crew_name="A"),
        make_record(overdue=3, crew_name="A"),
        make_record(due_in=3, crew_name="B"),
        make_record(due_in=3, crew_name="B"),
        make_record(crew_name="C"),
        make_record(crew_name="C"),
        make_record(never_completed=True, crew_name="C"),
    ]
    shuffled = records[:]
    random.Random(7).shuffle(shuffled)

    once = sort_by_urgency(shuffled)
    twice = sort_by_urgency(once)

    assert twice == once
    # Records equal under the whole chain keep their relative input order.
    equal_pair = [r for r in shuffled if r.crew_name == "A"]
    assert [r for r in once if r.crew_name == "A"] == equal_pair


def test_compare_is_zero_for_equal_chain(make_record):
    a = make_record(overdue=2)
    b = make_record(overdue=2)
    assert a.id != b.id
    assert compare_records(a, b) == 0


def test_list_order_is_crew_training_track(make_record):
    a = make_record(crew_name="amy", training_name="Rigging", track_name="Fly")
    b = make_record(crew_name="Amy", training_name="CPR", track_name="Stage")
    c = make_record(crew_name="Amy", training_name="CPR", track_name="Audio")
    d = make_record(crew_name="Bo", training_name="Arc flash", track_name="Audio", overdue=40)

    assert sort_for_list([d, a, b, c]) == [c, b, a, d]
