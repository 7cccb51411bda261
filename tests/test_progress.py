from datetime import date

import pytest

from Pianoacademy.core import progress_utils
from Pianoacademy.errors import NotFoundError, ValidationError
from Pianoacademy.repositories import build_repositories
from Pianoacademy.repositories.progress import merge_song

TODAY = date(2025, 1, 20)


def _song(number, status, start=None, done=None):
    song = {"number": number, "title": f"하농 {number}번", "status": status}
    if start:
        song["startDate"] = start
    if done:
        song["completedDate"] = done
    return song


def test_song_stats():
    songs = [
        _song(1, "completed", "2025-01-01", "2025-01-04"),
        _song(2, "completed", "2025-01-01", "2025-01-05"),
        _song(3, "in_progress", "2025-01-05"),
        # completed without dates is counted but not timed
        _song(4, "completed"),
    ]
    stats = progress_utils.calculate_song_stats(songs, 6)
    assert stats == {
        "totalSongs": 6,
        "completedSongs": 3,
        "inProgressSongs": 1,
        "completionRate": 50.0,
        "averageTimePerSong": 4,
    }


def test_song_stats_without_total():
    stats = progress_utils.calculate_song_stats([_song(1, "completed")], 0)
    assert stats["completionRate"] == 0
    assert stats["averageTimePerSong"] == 0
    assert progress_utils.calculate_song_stats([_song(1, "completed")] * 2, 3)["completionRate"] == 66.7


def test_progress_stats_across_books():
    progress = [
        {"status": "completed", "stats": {"totalSongs": 20, "completedSongs": 20, "completionRate": 100.0}},
        {"status": "in_progress", "stats": {"totalSongs": 60, "completedSongs": 15, "completionRate": 25.0}},
        {"status": "in_progress"},
    ]
    assert progress_utils.calculate_progress_stats(progress) == {
        "totalBooks": 3,
        "completedBooks": 1,
        "inProgressBooks": 2,
        "totalSongs": 80,
        "completedSongs": 35,
        "averageCompletionRate": 41.7,
    }
    assert progress_utils.calculate_progress_stats([])["totalBooks"] == 0


def test_monthly_progress_data(dataset):
    chart = progress_utils.get_monthly_progress_data(dataset.progress, months=3, today=TODAY)
    assert chart == {"labels": ["11월", "12월", "1월"], "data": [0, 2, 1]}
    year_end = progress_utils.get_monthly_progress_data(dataset.progress, months=2, today=date(2025, 2, 3))
    assert year_end["labels"] == ["1월", "2월"]
    assert progress_utils.get_monthly_progress_data([]) == {"labels": [], "data": []}


def test_merge_song_matches_number_or_title():
    songs = [_song(1, "in_progress", "2025-01-01")]
    merged = merge_song(songs, {"number": 1, "status": "completed"}, TODAY)
    assert merged == [{**songs[0], "status": "completed"}]
    assert songs[0]["status"] == "in_progress"
    by_title = merge_song(songs, {"title": "하농 1번", "memo": "좋음"}, TODAY)
    assert len(by_title) == 1
    appended = merge_song(songs, {"number": 2, "status": "in_progress"}, TODAY)
    assert appended[-1]["startDate"] == "2025-01-20"


def test_get_by_student_and_book(repos):
    found = repos.progress.get_by_student_and_book("1", "바이엘")
    assert found["id"] == "1"
    assert repos.progress.get_by_student_and_book("1", "체르니 100") is None
    assert [p["id"] for p in repos.progress.get_by_student_id("2")] == ["2"]


def test_create_defaults_stats_from_book(repos):
    created = repos.progress.create({"studentId": "3", "book": {"name": "하농", "totalSongs": 60}})
    assert created["songs"] == []
    assert created["stats"]["totalSongs"] == 60
    assert created["stats"]["completionRate"] == 0
    # newest first
    assert repos.progress.get_all()[0]["id"] == created["id"]
    with pytest.raises(ValidationError):
        repos.progress.create({"book": {"name": "하농"}})


def test_update_song_recomputes_stats(repos):
    repos.progress.today = lambda: date(2025, 1, 13)
    updated = repos.progress.update_song("1", {"number": 46, "status": "completed", "completedDate": "2025-01-13"})
    assert updated["stats"]["completedSongs"] == 3
    assert updated["stats"]["inProgressSongs"] == 0
    assert updated["stats"]["completionRate"] == 2.8
    assert updated["stats"]["averageTimePerSong"] == 8
    assert updated["lastUpdatedBy"] == "manual"

    added = repos.progress.update_song("1", {"number": 47, "title": "바이엘 47번", "status": "in_progress",
                                             "updatedBy": "lesson_note"})
    assert added["songs"][-1]["startDate"] == "2025-01-13"
    assert added["stats"]["inProgressSongs"] == 1
    assert added["lastUpdatedBy"] == "lesson_note"
    assert repos.progress.get_by_id("1")["songs"] == added["songs"]


def test_update_song_on_missing_progress(repos):
    with pytest.raises(NotFoundError) as info:
        repos.progress.update_song("nope", {"number": 1})
    assert str(info.value) == "진도 정보를 찾을 수 없습니다"


def test_delete_progress(repos):
    assert repos.progress.delete("2") == {"success": True}
    assert repos.progress.get_by_student_id("2") == []


@pytest.fixture
def fb(firebase_config, remote):
    return build_repositories(firebase_config, remote=remote, current_user=lambda: "teacher-1")


def test_firebase_book_lookup(fb, remote):
    remote.get_progress_by_book.return_value = {"success": True, "data": [{"id": "p1", "book": {"name": "바이엘"}}]}
    assert fb.progress.get_by_student_and_book("1", "바이엘")["id"] == "p1"
    remote.get_progress_by_book.assert_called_once_with("1", "바이엘")
    remote.get_progress_by_book.return_value = {"success": True, "data": []}
    assert fb.progress.get_by_student_and_book("1", "하농") is None


def test_firebase_update_song_writes_songs_and_stats(fb, remote):
    remote.get_progress_by_id.return_value = {"success": True, "data": {
        "id": "p1", "book": {"name": "하농", "totalSongs": 10}, "songs": [_song(1, "in_progress", "2025-01-01")],
    }}
    remote.update_progress.return_value = {"success": True}
    fb.progress.update_song("p1", {"number": 1, "status": "completed", "completedDate": "2025-01-08"})
    progress_id, patch = remote.update_progress.call_args.args
    assert progress_id == "p1"
    assert patch["stats"]["completionRate"] == 10.0
    assert patch["stats"]["averageTimePerSong"] == 7
    assert patch["songs"][0]["status"] == "completed"


def test_firebase_missing_progress(fb, remote):
    remote.get_progress_by_id.return_value = {"success": False, "error": "진도 정보를 찾을 수 없습니다", "notFound": True}
    with pytest.raises(NotFoundError):
        fb.progress.update_song("p9", {"number": 1})
    remote.update_progress.assert_not_called()
