"""FormsService over HTTP."""

import pytest

from forms_api.routes.rpc import MAX_ID, parse_id

HUGE_ID = "99999999999999999999999"


@pytest.fixture
def create_form(rpc):
    def _create(token, title="Survey", description="About you"):
        res = rpc("FormsService", "CreateForm", {"token": token, "title": title, "description": description})
        assert res.status_code == 200, res.text
        return res.json()

    return _create


class TestCreateForm:
    def test_owner_is_the_caller(self, alice, create_form):
        form = create_form(alice["token"])

        assert form["userId"] == int(alice["user"]["id"])
        assert form["title"] == "Survey"
        assert form["description"] == "About you"
        assert form["createdAt"] and form["updatedAt"]

    def test_title_is_required(self, rpc, alice):
        res = rpc("FormsService", "CreateForm", {"token": alice["token"], "description": "no title"})

        assert res.status_code == 400
        assert res.json()["message"] == "Title is required"


class TestGetAndListForms:
    def test_get_accepts_int_or_string_id(self, rpc, alice, create_form):
        form = create_form(alice["token"])

        for form_id in (form["id"], str(form["id"])):
            res = rpc("FormsService", "GetForm", {"token": alice["token"], "formId": form_id})
            assert res.status_code == 200
            assert res.json()["id"] == form["id"]

    @pytest.mark.parametrize("form_id", ["999", "abc", "", HUGE_ID, str(MAX_ID)])
    def test_get_missing(self, rpc, alice, form_id):
        res = rpc("FormsService", "GetForm", {"token": alice["token"], "formId": form_id})

        assert res.status_code == 404
        assert res.json()["message"] == f"Form with ID {form_id} does not exist"

    def test_list_only_returns_own_forms(self, rpc, alice, bob, create_form):
        create_form(alice["token"], title="A1")
        create_form(alice["token"], title="A2")
        create_form(bob["token"], title="B1")

        res = rpc("FormsService", "ListForms", {"token": alice["token"]})
        assert [f["title"] for f in res.json()["forms"]] == ["A1", "A2"]

    def test_list_empty(self, rpc, alice):
        assert rpc("FormsService", "ListForms", {"token": alice["token"]}).json() == {"forms": []}


class TestUpdateForm:
    def test_only_supplied_fields_change(self, rpc, alice, create_form):
        form = create_form(alice["token"])

        res = rpc("FormsService", "UpdateForm", {"token": alice["token"], "formId": form["id"], "title": "Renamed"})
        assert res.json()["title"] == "Renamed"
        assert res.json()["description"] == "About you"

        res = rpc("FormsService", "UpdateForm", {"token": alice["token"], "formId": form["id"], "description": ""})
        assert res.json()["title"] == "Renamed"
        assert res.json()["description"] == ""

    def test_empty_title_rejected(self, rpc, alice, create_form):
        form = create_form(alice["token"])
        res = rpc("FormsService", "UpdateForm", {"token": alice["token"], "formId": form["id"], "title": ""})

        assert res.status_code == 400
        assert res.json()["message"] == "Title cannot be empty"

    def test_someone_elses_form_looks_missing(self, rpc, alice, bob, create_form):
        form = create_form(alice["token"])

        res = rpc("FormsService", "UpdateForm", {"token": bob["token"], "formId": form["id"], "title": "Mine now"})
        assert res.status_code == 404

        res = rpc("FormsService", "GetForm", {"token": alice["token"], "formId": form["id"]})
        assert res.json()["title"] == "Survey"


class TestDeleteForm:
    def test_delete_removes_questions_and_responses(self, rpc, alice, create_form):
        token = alice["token"]
        form = create_form(token)
        question = rpc(
            "QuestionsService", "CreateQuestion", {"token": token, "formId": form["id"], "text": "Q", "type": "shorttext"}
        ).json()
        rpc(
            "ResponsesService",
            "CreateResponse",
            {"token": token, "formId": form["id"], "answers": [{"questionId": question["id"], "answer": "a"}]},
        )

        res = rpc("FormsService", "DeleteForm", {"token": token, "formId": form["id"]})
        assert res.json() == {"success": True, "message": "Form deleted successfully"}

        assert rpc("FormsService", "GetForm", {"token": token, "formId": form["id"]}).status_code == 404
        res = rpc("QuestionsService", "GetQuestion", {"token": token, "formId": form["id"], "questionId": question["id"]})
        assert res.status_code == 404

    def test_someone_elses_form_is_kept(self, rpc, alice, bob, create_form):
        form = create_form(alice["token"])

        res = rpc("FormsService", "DeleteForm", {"token": bob["token"], "formId": form["id"]})
        assert res.status_code == 404
        assert rpc("FormsService", "GetForm", {"token": alice["token"], "formId": form["id"]}).status_code == 200

    @pytest.mark.parametrize("method", ["UpdateForm", "DeleteForm"])
    def test_out_of_range_id_is_not_found(self, rpc, alice, method):
        res = rpc("FormsService", method, {"token": alice["token"], "formId": HUGE_ID, "title": "x"})

        assert res.status_code == 404
        assert res.json()["status"] == "NOT_FOUND"


class TestParseId:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("42", 42),
            (" 7 ", 7),
            ("0009", 9),
            (str(MAX_ID), MAX_ID),
            (str(MAX_ID + 1), None),
            (HUGE_ID, None),
            ("9" * 5000, None),
            ("-1", None),
            ("1.5", None),
            ("²", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_id(self, value, expected):
        assert parse_id(value) == expected
