from Pianoacademy.stores.base import EffectsMixin, THREE_MINUTES, Store


class LessonNoteStore(EffectsMixin, Store):
    name = "LessonNoteStore"
    ttl = THREE_MINUTES

    def __init__(self, repository, effects=None, activities=None, current_user=None, clock=None):
        self.repository = repository
        self.effects = effects
        self.activities = activities
        self.current_user = current_user
        super().__init__(clock)

    def _reset_state(self):
        self.lesson_notes = []
        self.student_notes = {}

    def fetch_lesson_notes(self, options=None, force_refresh=False):
        if not force_refresh and self.is_fresh():
            return self.lesson_notes

        def work():
            notes = self.repository.get_all(**(options or {}))
            self._set(lesson_notes=notes, last_fetched=self.now())
            return notes
        return self._run_action("수업 일지를 불러오는데 실패했습니다.", work)

    def fetch_student_notes(self, student_id, options=None):
        def work():
            notes = self.repository.get_by_student_id(student_id, **(options or {}))
            self._set(student_notes={**self.student_notes, student_id: notes})
            return notes
        return self._run_action("수업 일지를 불러오는데 실패했습니다.", work)

    def add_lesson_note(self, note_data):
        def work():
            note = self.repository.create(note_data)
            student_id = note_data["studentId"]
            self._set(
                lesson_notes=[note] + self.lesson_notes,
                student_notes={**self.student_notes, student_id: [note] + self.student_notes.get(student_id, [])},
            )
            return note
        note = self._run_action("수업 일지 추가에 실패했습니다.", work)
        self._log_activity({
            "type": "lesson_note",
            "action": "add",
            "title": "수업 일지 작성",
            "description": f"{note_data.get('studentName') or '학생'} - {note_data.get('date')}",
            "studentId": note_data["studentId"],
            "studentName": note_data.get("studentName"),
            "relatedId": note.get("id"),
        })
        return note

    def update_lesson_note(self, note_id, updates):
        def work():
            note = self.repository.update(note_id, updates)
            self._set(
                lesson_notes=[note if n.get("id") == note_id else n for n in self.lesson_notes],
                student_notes={
                    sid: [note if n.get("id") == note_id else n for n in items]
                    for sid, items in self.student_notes.items()
                },
            )
            return note
        return self._run_action("수업 일지 수정에 실패했습니다.", work)

    def delete_lesson_note(self, note_id):
        def work():
            self.repository.delete(note_id)
            self._set(
                lesson_notes=[n for n in self.lesson_notes if n.get("id") != note_id],
                student_notes={
                    sid: [n for n in items if n.get("id") != note_id]
                    for sid, items in self.student_notes.items()
                },
            )
        self._run_action("수업 일지 삭제에 실패했습니다.", work)

    def get_student_notes(self, student_id):
        return self.student_notes.get(student_id, [])
