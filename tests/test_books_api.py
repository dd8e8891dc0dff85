from datetime import datetime, timezone

from tests.factories import auth, make_catalog_book, make_user


def shelve(client, book_id, total=100, user_id="sadhak-1", type_="PAGES"):
    return client.post("/books/shelf", headers=auth(user_id), json={"book_id": book_id, "total_units": total, "type": type_})


def read(client, progress_id, delta, user_id="sadhak-1"):
    return client.post(f"/books/progress/{progress_id}", headers=auth(user_id), json={"delta": delta})


def daily_total_read(client, day):
    log = client.get(f"/sadhana/logs/{day.isoformat()}", headers=auth()).json()["log"]
    return log["total_read"] if log else None


def test_library_flags_shelved_books(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    make_catalog_book(db_session, title="Nectar of Devotion")

    shelved = shelve(client, gita.id, total=700)
    assert shelved.status_code == 201
    assert shelved.json()["author"] == "Srila Prabhupada"

    library = client.get("/books", headers=auth()).json()
    flags = {b["title"]: b["is_added"] for b in library["global_books"]}
    assert flags == {"Bhagavad-gita As It Is": True, "Nectar of Devotion": False}
    assert [item["book_id"] for item in library["user_shelf"]] == [gita.id]


def test_shelving_twice_is_conflict(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    assert shelve(client, gita.id).status_code == 201
    assert shelve(client, gita.id).status_code == 409


def test_shelving_unknown_book_or_bad_type(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    assert shelve(client, "missing").status_code == 404
    assert shelve(client, gita.id, type_="VERSES").status_code == 422
    assert shelve(client, gita.id, total=0).status_code == 422


def test_reading_advances_streak_and_daily_total(client, db_session, clock):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]

    item = read(client, progress_id, 10).json()
    assert item["current"] == 10
    assert item["current_streak"] == 1
    assert daily_total_read(client, clock.today) == 10

    clock.advance(days=1)
    item = read(client, progress_id, 5).json()
    assert item["current_streak"] == 2
    assert item["highest_streak"] == 2
    assert daily_total_read(client, clock.today) == 5


def test_correction_lowers_totals_but_not_streak(client, db_session, clock):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]
    read(client, progress_id, 10)

    item = read(client, progress_id, -3).json()
    assert item["current"] == 7
    assert item["current_streak"] == 1
    assert daily_total_read(client, clock.today) == 7

    item = read(client, progress_id, -50).json()
    assert item["current"] == 0
    assert daily_total_read(client, clock.today) == 0


def test_correction_alone_does_not_start_streak_or_log(client, db_session, clock):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]
    item = read(client, progress_id, -5).json()
    assert item["current"] == 0
    assert item["current_streak"] == 0
    assert daily_total_read(client, clock.today) is None


def test_progress_is_clamped_and_completes(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id, total=18, type_="chapters").json()["id"]
    item = read(client, progress_id, 25).json()
    assert item["type"] == "CHAPTERS"
    assert item["current"] == 18
    assert item["is_completed"] is True


def test_reading_across_a_missed_calendar_day_restarts(client, db_session, clock):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]

    clock.now = datetime(2025, 1, 10, 23, 0, tzinfo=timezone.utc)
    read(client, progress_id, 5)
    # 26 hours later, but the 11th had no reading
    clock.now = datetime(2025, 1, 12, 1, 0, tzinfo=timezone.utc)
    item = read(client, progress_id, 5).json()
    assert item["current_streak"] == 1
    assert item["highest_streak"] == 1


def test_other_users_progress_is_forbidden(client, db_session):
    make_user(db_session)
    make_user(db_session, "sadhak-2")
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]
    response = read(client, progress_id, 5, user_id="sadhak-2")
    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"
    assert read(client, "missing", 5).status_code == 404


def test_reset_progress_keeps_streak(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id, total=10).json()["id"]
    read(client, progress_id, 10)
    item = client.post(f"/books/progress/{progress_id}/reset", headers=auth()).json()
    assert item["current"] == 0
    assert item["is_completed"] is False
    assert item["current_streak"] == 1


def test_private_books(client, db_session):
    make_user(db_session)
    make_user(db_session, "sadhak-2")
    created = client.post(
        "/books/private", headers=auth(), json={"title": "Japa notes", "total_units": 50}
    )
    assert created.status_code == 201
    item = created.json()
    assert item["is_private"] is True

    other_library = client.get("/books", headers=auth("sadhak-2")).json()
    assert other_library["global_books"] == []
    assert client.delete(f"/books/{item['book_id']}", headers=auth("sadhak-2")).status_code == 403

    assert client.delete(f"/books/{item['book_id']}", headers=auth()).json()["status"] == "deleted"
    assert client.get("/books", headers=auth()).json()["user_shelf"] == []


def test_deleting_catalogue_book_only_unshelves_it(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    shelve(client, gita.id)
    assert client.delete(f"/books/{gita.id}", headers=auth()).status_code == 200
    library = client.get("/books", headers=auth()).json()
    assert library["user_shelf"] == []
    assert [b["id"] for b in library["global_books"]] == [gita.id]


def test_remove_from_shelf(client, db_session):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]
    response = client.delete(f"/books/progress/{progress_id}", headers=auth())
    assert response.json()["status"] == "removed"
    assert client.delete(f"/books/progress/{progress_id}", headers=auth()).status_code == 404


def test_reading_does_not_count_toward_sadhana_streak(client, db_session, clock):
    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]
    read(client, progress_id, 10)
    assert client.get("/streaks/me", headers=auth()).json()["sadhana"]["current_streak"] == 0

    response = client.put(
        "/sadhana/logs", headers=auth(), json={"date": clock.today.isoformat(), "missed_note": "travelling"}
    )
    data = response.json()
    assert data["log"]["total_read"] == 10
    assert data["streak"]["current_streak"] == 0
    assert data["streak"]["last_activity_day"] is None


def test_private_book_without_author(client, db_session):
    make_user(db_session)
    item = client.post("/books/private", headers=auth(), json={"title": "Japa notes", "total_units": 50}).json()
    assert item["author"] == "Unknown Author"
    shelf = client.get("/books", headers=auth()).json()["user_shelf"]
    assert shelf[0]["author"] == "Unknown Author"


def test_progress_update_locks_user_row_before_daily_log(client, db_session, monkeypatch):
    from app.crud import books as books_crud

    make_user(db_session)
    gita = make_catalog_book(db_session)
    progress_id = shelve(client, gita.id).json()["id"]

    locked = []
    real_lock = books_crud.get_user_for_update

    def recording_lock(db, user_id):
        locked.append(user_id)
        return real_lock(db, user_id)

    monkeypatch.setattr(books_crud, "get_user_for_update", recording_lock)
    assert read(client, progress_id, 3).status_code == 200
    assert locked == ["sadhak-1"]
