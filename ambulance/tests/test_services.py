import threading

import pytest
from django.core.management import call_command
from django.db import connection
from django.test.utils import CaptureQueriesContext
from io import StringIO

from ambulance.exceptions import Conflict, DuplicateKey, InvalidTransition, NotFound, ValidationError
from ambulance.models import Dispatch, DispatchState, Patient
from ambulance.services import dispatches, patients

pytestmark = pytest.mark.django_db


def _new_dispatch(**overrides):
    data = {
        'nhsNumber': '9434765919',
        'condition': 'Stroke symptoms',
        'patientName': 'Alice Smith',
        'patientAddress': '1 High Street, Edinburgh',
    }
    data.update(overrides)
    return dispatches.create_dispatch(data)


def test_state_machine_table():
    assert dispatches.can_transition(DispatchState.UNASSIGNED, DispatchState.ACCEPTED)
    assert dispatches.can_transition(DispatchState.ACCEPTED, DispatchState.COMPLETED)
    assert not dispatches.can_transition(DispatchState.UNASSIGNED, DispatchState.COMPLETED)
    assert not dispatches.can_transition(DispatchState.COMPLETED, DispatchState.ACCEPTED)


def test_create_dispatch_starts_unassigned():
    d = _new_dispatch()
    assert d.state == DispatchState.UNASSIGNED
    assert d.completed is False
    assert d.ambulance_id is None
    assert d.completion_time is None
    assert d.medical_history == ''


def test_create_dispatch_validates_required_fields():
    with pytest.raises(ValidationError):
        _new_dispatch(patientAddress='')
    with pytest.raises(ValidationError):
        dispatches.create_dispatch({'nhsNumber': '1', 'condition': 'x'})
    assert Dispatch.objects.count() == 0


def test_accept_is_one_conditional_update():
    d = _new_dispatch()
    with CaptureQueriesContext(connection) as ctx:
        assert dispatches.accept_dispatch(d.id, 'A1') == 1
    assert len(ctx.captured_queries) == 1
    sql = ctx.captured_queries[0]['sql']
    assert sql.upper().startswith('UPDATE')
    assert 'IS NULL' in sql.upper()


def test_lost_accept_raises_conflict_and_keeps_winner():
    d = _new_dispatch()
    dispatches.accept_dispatch(d.id, 'A1')
    with pytest.raises(Conflict):
        dispatches.accept_dispatch(d.id, 'A2')
    d.refresh_from_db()
    assert d.ambulance_id == 'A1'


def test_accept_missing_dispatch_raises_not_found():
    with pytest.raises(NotFound):
        dispatches.accept_dispatch(12345, 'A1')


def test_accept_requires_ambulance():
    d = _new_dispatch()
    with pytest.raises(ValidationError):
        dispatches.accept_dispatch(d.id, '')


def test_complete_unassigned_raises_invalid_transition():
    d = _new_dispatch()
    with pytest.raises(InvalidTransition):
        dispatches.complete_dispatch(d.id)
    d.refresh_from_db()
    assert d.state == DispatchState.UNASSIGNED


def test_complete_sets_time_once():
    d = _new_dispatch()
    dispatches.accept_dispatch(d.id, 'A1')
    assert dispatches.complete_dispatch(d.id) == 1
    d.refresh_from_db()
    assert d.state == DispatchState.COMPLETED
    stamped = d.completion_time
    assert stamped is not None
    with pytest.raises(NotFound):
        dispatches.complete_dispatch(d.id)
    d.refresh_from_db()
    assert d.completion_time == stamped


def test_format_dispatch_uses_integer_completed():
    d = _new_dispatch(patientLatitude=51.5, patientLongitude=-0.12)
    row = dispatches.format_dispatch(d)
    assert row['completed'] == 0 and type(row['completed']) is int
    assert row['patientLatitude'] == 51.5
    assert row['state'] == 'unassigned'


def test_hospital_rows_only_carry_completion_time_when_completed():
    a = _new_dispatch()
    b = _new_dispatch(patientName='Bob Jones')
    dispatches.accept_dispatch(b.id, 'A3')
    dispatches.complete_dispatch(b.id)
    board = dispatches.hospital_dispatches()
    assert [r['id'] for r in board['activeDispatches']] == [a.id]
    assert 'completionTime' not in board['activeDispatches'][0]
    assert [r['id'] for r in board['completedDispatches']] == [b.id]
    assert board['completedDispatches'][0]['ambulanceId'] == 'A3'


def test_patient_crud_cycle():
    patients.add_patient(nhs_number='4010232137', name='Carol White', address='4 Park Place')
    assert patients.get_patient('4010232137').medical_history == ''
    assert patients.update_patient('4010232137', name='Carol White', address='5 Park Place',
                                   medical_history='Epilepsy') == 1
    assert patients.format_patient(patients.get_patient('4010232137')) == {
        'nhsNumber': '4010232137',
        'name': 'Carol White',
        'address': '5 Park Place',
        'medicalHistory': 'Epilepsy',
    }
    assert patients.delete_patient('4010232137') == 1
    with pytest.raises(NotFound):
        patients.get_patient('4010232137')


def test_duplicate_patient_is_rejected_and_transaction_survives():
    patients.add_patient(nhs_number='1', name='First', address='A')
    with pytest.raises(DuplicateKey):
        patients.add_patient(nhs_number='1', name='Second', address='B')
    # the outer transaction is still usable after the failed insert
    assert Patient.objects.get(pk='1').name == 'First'


def test_update_and_delete_missing_patient_raise_not_found():
    with pytest.raises(NotFound):
        patients.update_patient('missing', name='x', address='y')
    with pytest.raises(NotFound):
        patients.delete_patient('missing')


def test_database_rejects_completion_without_acceptance():
    from django.db import IntegrityError, transaction

    d = _new_dispatch()
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Dispatch.objects.filter(pk=d.id).update(completed=True, completion_time=d.timestamp)


@pytest.mark.django_db(transaction=True)
def test_ensure_store_is_idempotent():
    out = StringIO()
    call_command('ensure_store', stdout=out)
    call_command('ensure_store', stdout=out)
    text = out.getvalue()
    assert text.count('ok: dispatches') == 2
    assert 'Dispatch store ready.' in text


@pytest.mark.django_db(transaction=True)
def test_concurrent_accepts_have_exactly_one_winner():
    d = _new_dispatch()
    crews = ['A1', 'A2', 'A3', 'A4']
    barrier = threading.Barrier(len(crews))
    outcomes = {}

    def attempt(ambulance_id):
        barrier.wait()
        try:
            outcomes[ambulance_id] = dispatches.accept_dispatch(d.id, ambulance_id)
        except Conflict:
            outcomes[ambulance_id] = 'conflict'
        finally:
            connection.close()

    threads = [threading.Thread(target=attempt, args=(crew,)) for crew in crews]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    winners = [crew for crew, result in outcomes.items() if result == 1]
    assert len(winners) == 1
    assert sorted(outcomes.values(), key=str) == [1, 'conflict', 'conflict', 'conflict']
    d.refresh_from_db()
    assert d.ambulance_id == winners[0]
    assert d.state == DispatchState.ACCEPTED
