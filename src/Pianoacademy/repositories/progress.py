from datetime import date

from Pianoacademy.core.progress_utils import calculate_song_stats, empty_stats
from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
    matches,
    now_iso,
    sort_desc,
)


def _same_song(song, song_data):
    for key in ("number", "title"):
        value = song_data.get(key)
        if value is not None and song.get(key) == value:
            return True
    return False


def merge_song(songs, song_data, today):
    """Songs with ``song_data`` merged into its match (same number or title) or appended.

    A newly appended song starts on ``today`` unless it carries a startDate.
    """
    songs = [dict(s) for s in songs or []]
    for index, song in enumerate(songs):
        if _same_song(song, song_data):
            songs[index] = {**song, **song_data}
            return songs
    songs.append({**song_data, "startDate": song_data.get("startDate") or today.isoformat()})
    return songs


class ProgressRules:
    """Per-book song progress of one student."""

    name = "ProgressRepository"
    collection_name = "progress"
    group = "progress"
    not_found_message = "진도 정보를 찾을 수 없습니다"
    required_fields = ("studentId",)
    today = staticmethod(date.today)

    def _new_progress(self, data):
        progress = {"songs": [], "status": "in_progress", **data}
        if not progress.get("stats"):
            progress["stats"] = empty_stats((progress.get("book") or {}).get("totalSongs") or 0)
        return progress

    def _song_patch(self, progress, song_data):
        songs = merge_song(progress.get("songs"), song_data, self.today())
        total = (progress.get("book") or {}).get("totalSongs") or 0
        return {
            "songs": songs,
            "stats": calculate_song_stats(songs, total),
            "lastUpdatedBy": song_data.get("updatedBy") or "manual",
        }

    def get_by_student_and_book(self, student_id, book_name):
        """The student's progress on ``book_name``, or None."""
        self._log("get_by_student_and_book", student_id, book_name)
        for progress in self.get_by_student_id(student_id):
            if (progress.get("book") or {}).get("name") == book_name:
                return progress
        return None

    def update_song(self, progress_id, song_data):
        """Add or update one song and recompute the book's stats."""
        self._log("update_song", progress_id, song_data)
        progress = self.get_by_id(progress_id)
        return self.update(progress_id, self._song_patch(progress, song_data))


class MockProgressRepository(ProgressRules, MockCrudRepository):

    def get_all(self, **filters):
        return sort_desc(super().get_all(**filters), "updatedAt")

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        self._delay()
        return sort_desc(self._list(lambda p: p.get("studentId") == student_id), "updatedAt")

    def create(self, data):
        self.validate_new(data)
        stamp = now_iso()
        return super().create({**self._new_progress(data), "createdAt": stamp, "updatedAt": stamp})


class ApiProgressRepository(ProgressRules, ApiCrudRepository):

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_progress(data))

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._call("get_by_student_id", self.client.get, self._path("by_student", student_id=student_id))

    def update_song(self, progress_id, song_data):
        self._log("update_song", progress_id, song_data)
        return self._call("update_song", self.client.post, self._path("song", id=progress_id), json=song_data)


class FirebaseProgressRepository(ProgressRules, FirebaseCrudRepository):

    def _remote_list(self, teacher_id, **filters):
        result = self.remote.get_all_progress(teacher_id)
        if result.get("success") and filters:
            result["data"] = [p for p in result["data"] if matches(p, filters)]
        return result

    def _remote_get(self, item_id):
        return self.remote.get_progress_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.add_progress(data, teacher_id)

    def _remote_update(self, item_id, partial):
        return self.remote.update_progress(item_id, partial)

    def _remote_delete(self, item_id):
        return self.remote.delete_progress(item_id)

    def _prepare_new(self, data):
        return self._new_progress(data)

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._data("get_by_student_id", self.remote.get_progress_by_student(student_id))

    def get_by_student_and_book(self, student_id, book_name):
        self._log("get_by_student_and_book", student_id, book_name)
        found = self._data("get_by_student_and_book", self.remote.get_progress_by_book(student_id, book_name))
        return found[0] if found else None
