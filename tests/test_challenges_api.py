from tests.factories import auth, make_user


def create_challenge(client, title="Bhagavad-gita chapter 2", user_id="sadhak-1"):
    return client.post("/challenges", headers=auth(user_id), json={"title": title}).json()


def add_shloka(client, challenge_id, reference="BG 2.13", user_id="sadhak-1"):
    return client.post(
        f"/challenges/{challenge_id}/shlokas",
        headers=auth(user_id),
        json={"reference": reference, "content": "dehino 'smin yatha dehe"},
    )


def set_status(client, shloka_id, status, user_id="sadhak-1"):
    return client.patch(f"/shlokas/{shloka_id}/status", headers=auth(user_id), json={"status": status})


def test_adding_verses_does_not_start_streak(client, db_session):
    make_user(db_session)
    challenge = create_challenge(client)
    response = add_shloka(client, challenge["id"])
    assert response.status_code == 201
    assert response.json()["status"] == "NOT_STARTED"

    listed = client.get("/challenges", headers=auth()).json()
    assert listed[0]["current_streak"] == 0
    assert listed[0]["last_learned_date"] is None
    assert [s["reference"] for s in listed[0]["shlokas"]] == ["BG 2.13"]


def test_learning_verses_builds_streak(client, db_session, clock):
    make_user(db_session)
    challenge = create_challenge(client)
    first = add_shloka(client, challenge["id"], "BG 2.13").json()
    second = add_shloka(client, challenge["id"], "BG 2.14").json()
    third = add_shloka(client, challenge["id"], "BG 2.20").json()

    assert set_status(client, first["id"], "LEARNING").json()["current_streak"] == 0
    assert set_status(client, first["id"], "learned").json()["current_streak"] == 1
    # A second verse on the same day does not double count
    assert set_status(client, second["id"], "LEARNED").json()["current_streak"] == 1

    clock.advance(days=1)
    # Re-marking a verse that is already learned is not new progress
    assert set_status(client, first["id"], "LEARNED").json()["current_streak"] == 1
    data = set_status(client, third["id"], "LEARNED").json()
    assert data["current_streak"] == 2
    assert data["highest_streak"] == 2
    assert data["shloka"]["status"] == "LEARNED"


def test_gap_restarts_challenge_streak(client, db_session, clock):
    make_user(db_session)
    challenge = create_challenge(client)
    first = add_shloka(client, challenge["id"], "BG 2.13").json()
    second = add_shloka(client, challenge["id"], "BG 2.14").json()
    set_status(client, first["id"], "LEARNED")
    clock.advance(days=2)
    data = set_status(client, second["id"], "LEARNED").json()
    assert data["current_streak"] == 1
    assert data["highest_streak"] == 1


def test_invalid_status_is_rejected(client, db_session):
    make_user(db_session)
    challenge = create_challenge(client)
    shloka = add_shloka(client, challenge["id"]).json()
    assert set_status(client, shloka["id"], "MASTERED").status_code == 422


def test_other_users_verses_are_not_found(client, db_session):
    make_user(db_session)
    make_user(db_session, "sadhak-2")
    challenge = create_challenge(client)
    shloka = add_shloka(client, challenge["id"]).json()
    assert set_status(client, shloka["id"], "LEARNED", user_id="sadhak-2").status_code == 404
    assert add_shloka(client, challenge["id"], user_id="sadhak-2").status_code == 404
    assert client.get("/challenges", headers=auth("sadhak-2")).json() == []


def test_challenges_ordered_by_recent_activity(client, db_session, clock):
    make_user(db_session)
    older = create_challenge(client, "Isopanisad")
    clock.advance(hours=1)
    newer = create_challenge(client, "Chapter 12")
    titles = [c["title"] for c in client.get("/challenges", headers=auth()).json()]
    assert titles == ["Chapter 12", "Isopanisad"]

    clock.advance(hours=1)
    add_shloka(client, older["id"], "Iso 1")
    titles = [c["title"] for c in client.get("/challenges", headers=auth()).json()]
    assert titles == ["Isopanisad", "Chapter 12"]
    assert newer["current_streak"] == 0


def test_delete_shloka_and_challenge(client, db_session):
    make_user(db_session)
    challenge = create_challenge(client)
    shloka = add_shloka(client, challenge["id"]).json()
    assert client.delete(f"/shlokas/{shloka['id']}", headers=auth()).status_code == 204
    assert client.delete(f"/shlokas/{shloka['id']}", headers=auth()).status_code == 404
    assert client.delete(f"/challenges/{challenge['id']}", headers=auth()).status_code == 204
    assert client.get("/challenges", headers=auth()).json() == []
