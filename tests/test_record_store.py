import os

import pytest

from conftest import make_record
from srms.errors import BackupError, CapacityExceeded, DuplicateKey
from srms.record_store import RecordStore, StudentRecord


def _reload(store):
    fresh = RecordStore(store.path)
    fresh.load()
    return fresh


def test_round_trip_with_zero_and_ten_subjects(store) -> None:
    empty = StudentRecord(1, 'Asha', 'ECE', 2, 91.25, [])
    full = make_record(2, [float(10 * i) + 0.5 for i in range(10)])
    store.add(empty)
    store.add(full)

    assert store.save() is True
    loaded = _reload(store)

    assert list(loaded) == [empty, full]


def test_save_format(store) -> None:
    store.add(StudentRecord(5, 'Ravi', 'ME', 4, 75.0, [('Math', 38.5)]))
    store.save()

    with open(store.path) as f:
        assert f.read() == '5 Ravi ME 4 1 75.00\nMath 38.50\n'


def test_missing_file_loads_empty(store) -> None:
    assert store.load() == 0
    assert len(store) == 0


def test_subject_count_is_clamped(store) -> None:
    lines = ['9 Kim IT 1 -3 50.00\n', '10 Lee IT 1 12 50.00\n']
    lines += [f'S{i} 50.00\n' for i in range(12)]
    with open(store.path, 'w') as f:
        f.writelines(lines)

    store.load()

    assert store.find_by_roll(9).subjects == []
    assert len(store.find_by_roll(10).subjects) == 10
    # the two surplus subject lines are read as a header and stop the load
    assert len(store) == 2


def test_bad_subject_line_becomes_placeholder(store) -> None:
    with open(store.path, 'w') as f:
        f.write('1 Ann CS 2 3 80.00\nMath 70\nPhysics lots\nChem 55 extra\n2 Bob CS 2 0 60.00\n')

    store.load()

    assert store.find_by_roll(1).subjects == [('Math', 70.0), ('NA', 0.0), ('NA', 0.0)]
    assert store.find_by_roll(2) is not None


def test_bad_header_stops_loading(store) -> None:
    with open(store.path, 'w') as f:
        f.write('1 Ann CS 2 0 80.00\nx Bob CS 2 0 60.00\n3 Cat CS 2 0 70.00\n')

    assert store.load() == 1
    assert store.find_by_roll(3) is None


def test_duplicate_roll_is_rejected(store) -> None:
    store.add(make_record(1, (50,)))

    with pytest.raises(DuplicateKey):
        store.add(make_record(1, (60,)))
    assert store.find_by_roll(1).marks == [50]


def test_two_hundred_and_first_student_is_rejected(store) -> None:
    for roll in range(200):
        store.add(make_record(roll))

    with pytest.raises(CapacityExceeded):
        store.add(make_record(999))
    assert len(store) == 200
    assert store.find_by_roll(999) is None


def test_backup_is_verbatim_copy(store, tmp_path) -> None:
    store.add(make_record(1, (45, 55)))
    store.save()

    target = store.backup(str(tmp_path), stamp='202601010000')

    assert os.path.basename(target) == 'backup_student_202601010000.txt'
    with open(target) as copy, open(store.path) as original:
        assert copy.read() == original.read()


def test_backup_without_student_file(store, tmp_path) -> None:
    with pytest.raises(BackupError):
        store.backup(str(tmp_path))


def test_load_stops_at_student_cap(store) -> None:
    with open(store.path, 'w') as f:
        for roll in range(210):
            f.write(f'{roll} S{roll} CS 1 1 70.00\nMath 55.00\n')

    assert store.load() == 200
    assert store.find_by_roll(199) is not None
    assert store.find_by_roll(200) is None


def test_save_into_missing_directory_returns_false(tmp_path) -> None:
    store = RecordStore(str(tmp_path / 'missing' / 'student.txt'))
    store.add(make_record(1, (50,)))

    assert store.save() is False


def test_failed_backup_copy(store, tmp_path) -> None:
    store.add(make_record(1, (50,)))
    store.save()

    with pytest.raises(BackupError, match='Backup failed.'):
        store.backup(str(tmp_path / 'missing'))
