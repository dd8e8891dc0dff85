from datetime import date, timedelta

from app.config import settings
from app.models import ShlokaChallenge, UserBookProgress, UserRole
from tests.factories import auth, make_catalog_book, make_user

CRON_HEADERS = {"X-Cron-Secret": "test-cron-secret"}


def seed_lapsed_streams(db, today):
    make_user(db, current_streak=6, highest_streak=10, last_sadhana_date=today - timedelta(days=3))
    book = make_catalog_book(db)
    db.add(UserBookProgress(
        user_id="sadhak-1", book_id=book.id, total_units=100, current_value=20,
        current_streak=2, highest_streak=2, last_read_date=today - timedelta(days=1),
    ))
    db.add(ShlokaChallenge(
        user_id="sadhak-1", title="Chapter 2", current_streak=3, highest_streak=3,
        last_learned_date=today - timedelta(days=4),
    ))
    db.commit()


def test_overview_shows_effective_streaks(client, db_session, clock):
    seed_lapsed_streams(db_session, clock.today)
    data = client.get("/streaks/me", headers=auth()).json()

    assert data["today"] == clock.today.isoformat()
    assert data["sadhana"]["current_streak"] == 6
    assert data["sadhana"]["effective_streak"] == 0
    assert data["sadhana"]["highest_streak"] == 10
    [book] = data["books"]
    assert book["title"] == "Bhagavad-gita As It Is"
    assert book["effective_streak"] == 2
    [challenge] = data["challenges"]
    assert challenge["effective_streak"] == 0


def test_cron_requires_secret(client, db_session):
    make_user(db_session)
    assert client.post("/cron/reset-streaks").status_code == 403
    assert client.post("/cron/reset-streaks", headers={"X-Cron-Secret": "guess"}).status_code == 403


def test_cron_resets_lapsed_streaks(client, db_session, clock):
    seed_lapsed_streams(db_session, clock.today)
    response = client.post("/cron/reset-streaks", headers=CRON_HEADERS)
    assert response.status_code == 200
    assert response.json() == {
        "reference_day": clock.today.isoformat(),
        "users_reset": 1,
        "books_reset": 0,
        "challenges_reset": 1,
        "errors": 0,
        "failed_streams": [],
    }
    overview = client.get("/streaks/me", headers=auth()).json()
    assert overview["sadhana"]["current_streak"] == 0
    assert overview["sadhana"]["highest_streak"] == 10
    assert overview["books"][0]["current_streak"] == 2

    again = client.post("/cron/reset-streaks", headers=CRON_HEADERS).json()
    assert again["users_reset"] + again["books_reset"] + again["challenges_reset"] == 0


def test_cron_accepts_reference_date(client, db_session, clock):
    seed_lapsed_streams(db_session, clock.today)
    earlier = clock.today - timedelta(days=2)
    data = client.post("/cron/reset-streaks", headers=CRON_HEADERS, params={"date": earlier.isoformat()}).json()
    assert data["reference_day"] == earlier.isoformat()
    assert data["users_reset"] == 0
    assert data["challenges_reset"] == 1


def test_cron_disabled_without_secret_outside_debug(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", "")
    monkeypatch.setattr(settings, "DEBUG", False)
    assert client.post("/cron/reset-streaks", headers=CRON_HEADERS).status_code == 403


def test_manual_reset_is_admin_only(client, db_session, clock):
    seed_lapsed_streams(db_session, clock.today)
    make_user(db_session, "admin-1", role=UserRole.ADMIN)
    assert client.post("/cron/reset-streaks/manual", headers=auth()).status_code == 403

    response = client.post("/cron/reset-streaks/manual", headers=auth("admin-1"), params={"date": date(2025, 1, 10).isoformat()})
    assert response.status_code == 200
    assert response.json()["users_reset"] == 1


def test_logging_after_sweep_restarts_at_one(client, db_session, clock):
    seed_lapsed_streams(db_session, clock.today)
    client.post("/cron/reset-streaks", headers=CRON_HEADERS)
    response = client.put(
        "/sadhana/logs", headers=auth(), json={"date": clock.today.isoformat(), "chanting_rounds": 16}
    )
    streak = response.json()["streak"]
    assert streak["current_streak"] == 1
    assert streak["highest_streak"] == 10
