from Pianoacademy.core.finance import EXPENSE_CATEGORIES, get_monthly_expense_stats
from Pianoacademy.core.formatters import format_date
from Pianoacademy.core.validators import ensure_valid, validate_amount
from Pianoacademy.errors import ValidationError
from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
    in_date_range,
    matches,
    sort_desc,
)


class ExpenseRules:
    name = "ExpenseRepository"
    collection_name = "expenses"
    group = "expenses"
    not_found_message = "지출 내역을 찾을 수 없습니다"
    required_fields = ("category", "amount", "date")

    def validate_new(self, data):
        super().validate_new(data)
        if data["category"] not in EXPENSE_CATEGORIES:
            raise ValidationError(f"알 수 없는 지출 항목입니다: {data['category']}")
        ensure_valid(validate_amount(data["amount"]))

    def _new_expense(self, data):
        return {"description": "", **data, "date": format_date(data["date"])}

    def get_by_category(self, category):
        self._log("get_by_category", category)
        return [e for e in self.get_all() if e.get("category") == category]

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        return sort_desc([e for e in self.get_all() if in_date_range(e.get("date"), start, end)], "date")

    def get_monthly_stats(self, year, month):
        """{expenses, totalAmount, count, categoryStats} for one calendar month."""
        self._log("get_monthly_stats", year, month)
        return get_monthly_expense_stats(self.get_all(), year, month)


class MockExpenseRepository(ExpenseRules, MockCrudRepository):

    def get_all(self, **filters):
        return sort_desc(super().get_all(**filters), "date")

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_expense(data))


class ApiExpenseRepository(ExpenseRules, ApiCrudRepository):

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_expense(data))

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        params = {"startDate": format_date(start), "endDate": format_date(end)}
        return self._call("get_by_date_range", self.client.get, self._path("list"), params=params)


class FirebaseExpenseRepository(ExpenseRules, FirebaseCrudRepository):

    def _remote_list(self, teacher_id, **filters):
        result = self.remote.get_expenses_by_teacher(teacher_id)
        if result.get("success") and filters:
            result["data"] = [e for e in result["data"] if matches(e, filters)]
        return result

    def _remote_get(self, item_id):
        return self.remote.get_expense_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.add_expense(data, teacher_id)

    def _remote_update(self, item_id, partial):
        return self.remote.update_expense(item_id, partial)

    def _remote_delete(self, item_id):
        return self.remote.delete_expense(item_id)

    def _prepare_new(self, data):
        return self._new_expense(data)

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        return self._data("get_by_date_range", self.remote.get_expenses_by_range(
            self._teacher_id(), format_date(start), format_date(end)))
