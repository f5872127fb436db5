from datetime import datetime, timedelta, timezone

from campus_recruit.core.auth import issue_token

API = "/api/v1"


def test_only_recruiters_and_admins_post_jobs(client, make_user, make_job) -> None:
    _, student_headers = make_user("student")
    _, admin_headers = make_user("admin")
    recruiter, recruiter_headers = make_user("recruiter")

    body = {
        "title": "QA Intern", "description": "Test the placement portal.", "requirements": "Attention to detail.",
        "location": "Remote", "job_type": "internship",
    }
    assert client.post(f"{API}/jobs", json=body, headers=student_headers).status_code == 403
    assert client.post(f"{API}/jobs", json=body).status_code == 401

    job = make_job(recruiter_headers)
    assert job["status"] == "active"
    assert job["is_open"] is True
    assert job["recruiter_id"] == recruiter["id"]
    assert job["recruiter"]["email"] == recruiter["email"]

    assert make_job(admin_headers)["status"] == "active"


def test_job_validation(client, make_user) -> None:
    _, recruiter_headers = make_user("recruiter")

    resp = client.post(
        f"{API}/jobs",
        json={"title": "", "description": "short", "requirements": "short", "location": "X", "job_type": "gig"},
        headers=recruiter_headers,
    )

    assert resp.status_code == 400
    fields = {error["field"] for error in resp.json()["errors"]}
    assert {"title", "description", "requirements", "job_type"} <= fields


def test_list_jobs_is_public_with_filters(client, make_user, make_job) -> None:
    _, recruiter_headers = make_user("recruiter")
    make_job(recruiter_headers, title="Python Developer", location="Chennai",
             requirements="Three years of web services work.")
    make_job(recruiter_headers, title="Data Intern", job_type="internship", location="Pune",
             requirements="Spreadsheets and some pandas experience.")
    newest = make_job(recruiter_headers, title="Go Developer", job_type="contract", location="Chennai",
                      description="Own the Kubernetes deployment tooling.")

    everything = client.get(f"{API}/jobs").json()["data"]
    assert everything["pagination"]["total"] == 3
    assert everything["jobs"][0]["id"] == newest["id"]

    chennai = client.get(f"{API}/jobs", params={"location": "chennai"}).json()["data"]
    assert {j["title"] for j in chennai["jobs"]} == {"Python Developer", "Go Developer"}

    interns = client.get(f"{API}/jobs", params={"job_type": "internship"}).json()["data"]
    assert [j["title"] for j in interns["jobs"]] == ["Data Intern"]

    searched = client.get(f"{API}/jobs", params={"search": "python"}).json()["data"]
    assert [j["title"] for j in searched["jobs"]] == ["Python Developer"]

    by_requirements = client.get(f"{API}/jobs", params={"search": "PANDAS"}).json()["data"]
    assert [j["title"] for j in by_requirements["jobs"]] == ["Data Intern"]

    by_description = client.get(f"{API}/jobs", params={"search": "kubernetes"}).json()["data"]
    assert [j["title"] for j in by_description["jobs"]] == ["Go Developer"]

    paged = client.get(f"{API}/jobs", params={"page": 2, "limit": 2}).json()["data"]
    assert len(paged["jobs"]) == 1
    assert paged["pagination"]["pages"] == 2


def test_job_stats(client, make_user, make_job) -> None:
    _, recruiter_headers = make_user("recruiter")
    make_job(recruiter_headers)
    closed = make_job(recruiter_headers, job_type="internship")
    client.put(f"{API}/jobs/{closed['id']}", json={"status": "closed"}, headers=recruiter_headers)

    stats = client.get(f"{API}/jobs/stats").json()["data"]

    assert stats["total_jobs"] == 2
    assert stats["active_jobs"] == 1
    assert stats["closed_jobs"] == 1
    assert stats["job_type_stats"]["internship"] == 1
    assert stats["job_type_stats"]["part_time"] == 0


def test_update_is_owner_or_admin_after_existence_check(client, make_user, make_job) -> None:
    _, owner_headers = make_user("recruiter")
    _, other_headers = make_user("recruiter")
    _, admin_headers = make_user("admin")
    job = make_job(owner_headers)

    assert client.put(f"{API}/jobs/9999", json={"title": "X"}, headers=other_headers).status_code == 404
    assert client.put(f"{API}/jobs/{job['id']}", json={"title": "X"}, headers=other_headers).status_code == 403

    mine = client.put(f"{API}/jobs/{job['id']}", json={"title": "Senior Engineer"}, headers=owner_headers)
    assert mine.status_code == 200
    assert mine.json()["data"]["job"]["title"] == "Senior Engineer"
    assert mine.json()["data"]["job"]["location"] == job["location"]

    by_admin = client.put(f"{API}/jobs/{job['id']}", json={"status": "inactive"}, headers=admin_headers)
    assert by_admin.status_code == 200
    assert by_admin.json()["data"]["job"]["is_open"] is False


def test_job_detail_is_personalised(client, make_user, make_job) -> None:
    _, owner_headers = make_user("recruiter")
    _, other_headers = make_user("recruiter")
    _, student_headers = make_user("student")
    job = make_job(owner_headers)
    client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=student_headers)

    anonymous = client.get(f"{API}/jobs/{job['id']}").json()["data"]
    assert anonymous["job"]["id"] == job["id"]
    assert "applications" not in anonymous
    assert "has_applied" not in anonymous

    owner = client.get(f"{API}/jobs/{job['id']}", headers=owner_headers).json()["data"]
    assert len(owner["applications"]) == 1

    other = client.get(f"{API}/jobs/{job['id']}", headers=other_headers).json()["data"]
    assert "applications" not in other

    student = client.get(f"{API}/jobs/{job['id']}", headers=student_headers).json()["data"]
    assert student["has_applied"] is True

    assert client.get(f"{API}/jobs/9999").status_code == 404


def test_past_deadline_makes_job_closed(client, make_user, make_job) -> None:
    _, recruiter_headers = make_user("recruiter")
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    future = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()

    assert make_job(recruiter_headers, application_deadline=past)["is_open"] is False
    assert make_job(recruiter_headers, application_deadline=future)["is_open"] is True


def test_recruiter_jobs_carry_application_counts(client, make_user, make_job) -> None:
    recruiter, recruiter_headers = make_user("recruiter")
    _, other_headers = make_user("recruiter")
    _, student_headers = make_user("student")
    _, another_student_headers = make_user("student")
    popular = make_job(recruiter_headers, title="Popular")
    make_job(recruiter_headers, title="Quiet")
    make_job(other_headers, title="Elsewhere")
    for headers in (student_headers, another_student_headers):
        client.post(f"{API}/applications", json={"job_id": popular["id"]}, headers=headers)

    mine = client.get(f"{API}/jobs/recruiter", headers=recruiter_headers).json()["data"]
    counts = {j["title"]: j["application_count"] for j in mine["jobs"]}
    assert counts == {"Popular": 2, "Quiet": 0}

    by_id = client.get(f"{API}/jobs/recruiter/{recruiter['id']}", headers=other_headers).json()["data"]
    assert by_id["pagination"]["total"] == 2

    assert client.get(f"{API}/jobs/recruiter", headers=student_headers).status_code == 403


def test_delete_job_removes_its_applications(client, make_user, make_job) -> None:
    _, owner_headers = make_user("recruiter")
    _, other_headers = make_user("recruiter")
    _, student_headers = make_user("student")
    job = make_job(owner_headers)
    application = client.post(
        f"{API}/applications", json={"job_id": job["id"]}, headers=student_headers
    ).json()["data"]["application"]

    assert client.delete(f"{API}/jobs/{job['id']}", headers=other_headers).status_code == 403
    assert client.delete(f"{API}/jobs/{job['id']}", headers=owner_headers).status_code == 200

    assert client.get(f"{API}/jobs/{job['id']}").status_code == 404
    assert client.get(f"{API}/applications/{application['id']}", headers=student_headers).status_code == 404
    assert client.delete(f"{API}/jobs/{job['id']}", headers=owner_headers).status_code == 404


def test_bad_credentials_fall_back_to_anonymous_on_public_job_routes(client, make_user, make_job) -> None:
    owner, owner_headers = make_user("recruiter")
    _, student_headers = make_user("student")
    job = make_job(owner_headers)
    client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=student_headers)
    expired = issue_token(owner["id"], owner["email"], "recruiter", expires_delta=timedelta(seconds=-30))["token"]

    for header in ("Bearer garbage", "Token x", f"Bearer {expired}"):
        listed = client.get(f"{API}/jobs", headers={"Authorization": header})
        assert listed.status_code == 200
        assert listed.json()["data"]["pagination"]["total"] == 1

        detail = client.get(f"{API}/jobs/{job['id']}", headers={"Authorization": header})
        assert detail.status_code == 200
        assert set(detail.json()["data"]) == {"job"}


def test_owner_rights_end_when_recruiter_role_is_removed(client, make_user, make_job) -> None:
    _, admin_headers = make_user("admin")
    owner, owner_headers = make_user("recruiter")
    _, student_headers = make_user("student")
    job = make_job(owner_headers)
    client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=student_headers)

    demoted = client.put(f"{API}/users/{owner['id']}", json={"role": "student"}, headers=admin_headers)
    assert demoted.status_code == 200

    detail = client.get(f"{API}/jobs/{job['id']}", headers=owner_headers).json()["data"]
    assert "applications" not in detail
    assert detail["has_applied"] is False
