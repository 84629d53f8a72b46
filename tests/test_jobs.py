# tests/test_jobs.py
from careercraft.schemas.schemas import JobFilters
from careercraft.services.job_service import build_open_jobs_filter

API = "/api/v1"


def test_create_job_as_recruiter(recruiter, post_job):
    c, user = recruiter
    job = post_job(c)
    assert job["companyName"] == "Acme Corp"
    assert job["postedBy"] == user["id"]
    assert job["status"] == "open"
    assert job["experienceLevel"] == "Not Specified"


def test_create_job_requires_recruiter(client, seeker):
    seeker_client, _ = seeker
    body = {"title": "X", "description": "Y", "location": "Z", "jobType": "Full-time", "category": "C"}
    assert client.post(f"{API}/jobs", json=body).status_code == 401
    assert seeker_client.post(f"{API}/jobs", json=body).status_code == 403


def test_create_job_validates_body(recruiter):
    c, _ = recruiter
    r = c.post(f"{API}/jobs", json={"title": "X", "description": "Y", "location": "Z", "jobType": "Gig", "category": "C"})
    assert r.status_code == 400
    r = c.post(f"{API}/jobs", json={"title": "X" * 101, "description": "Y", "location": "Z", "jobType": "Remote", "category": "C"})
    assert r.status_code == 400


def test_create_job_without_company_name(recruiter, db):
    c, _ = recruiter
    db.users.update_one({"email": "recruiter@example.com"}, {"$set": {"company_name": None}})
    r = c.post(f"{API}/jobs", json={"title": "X", "description": "Y", "location": "Z", "jobType": "Remote", "category": "C"})
    assert r.status_code == 400
    assert "Company name not found" in r.json()["detail"]


def test_list_open_jobs_pagination(client, recruiter, post_job):
    c, _ = recruiter
    for i in range(15):
        post_job(c, title=f"Designer {i}", category="Design")
    for i in range(3):
        post_job(c, title=f"Engineer {i}", category="Engineering")

    r = client.get(f"{API}/jobs", params={"category": "Design", "page": 2, "limit": 10})
    assert r.status_code == 200
    body = r.json()
    assert len(body["jobs"]) == 5
    assert body["totalPages"] == 2
    assert body["totalJobs"] == 15
    assert body["currentPage"] == 2


def test_list_only_open_jobs_but_get_by_id_returns_any_status(client, recruiter, post_job):
    c, _ = recruiter
    open_job = post_job(c, title="Open role")
    closed_job = post_job(c, title="Closed role")
    c.put(f"{API}/jobs/{closed_job['id']}", json={"status": "closed"})

    titles = [job["title"] for job in client.get(f"{API}/jobs").json()["jobs"]]
    assert titles == ["Open role"]

    r = client.get(f"{API}/jobs/{closed_job['id']}")
    assert r.status_code == 200
    assert r.json()["status"] == "closed"
    assert client.get(f"{API}/jobs/{open_job['id']}").status_code == 200


def test_search_and_location_filters(client, recruiter, post_job):
    c, _ = recruiter
    post_job(c, title="Data Analyst", skillsRequired=["SQL", "Tableau"], location="Remote - India")
    post_job(c, title="Frontend Developer", skillsRequired=["React"], location="Pune")

    r = client.get(f"{API}/jobs", params={"search": "tableau"})
    assert [j["title"] for j in r.json()["jobs"]] == ["Data Analyst"]

    r = client.get(f"{API}/jobs", params={"search": "acme"})
    assert r.json()["totalJobs"] == 2

    # any term may match, in any field
    r = client.get(f"{API}/jobs", params={"search": "tableau react"})
    assert sorted(j["title"] for j in r.json()["jobs"]) == ["Data Analyst", "Frontend Developer"]

    r = client.get(f"{API}/jobs", params={"search": "   "})
    assert r.json()["totalJobs"] == 2

    r = client.get(f"{API}/jobs", params={"location": "pune"})
    assert [j["title"] for j in r.json()["jobs"]] == ["Frontend Developer"]

    r = client.get(f"{API}/jobs", params={"jobType": "Internship"})
    assert r.json()["totalJobs"] == 0


def test_sort_oldest_first(client, recruiter, post_job):
    c, _ = recruiter
    for title in ("first", "second", "third"):
        post_job(c, title=title)

    newest = [j["title"] for j in client.get(f"{API}/jobs").json()["jobs"]]
    oldest = [j["title"] for j in client.get(f"{API}/jobs", params={"sortBy": "oldest"}).json()["jobs"]]
    assert newest == ["third", "second", "first"]
    assert oldest == ["first", "second", "third"]


def test_listing_rejects_bad_paging(client):
    assert client.get(f"{API}/jobs", params={"limit": 101}).status_code == 400
    assert client.get(f"{API}/jobs", params={"page": 0}).status_code == 400


def test_update_job_by_owner(recruiter, post_job):
    c, _ = recruiter
    job = post_job(c)
    r = c.put(f"{API}/jobs/{job['id']}", json={"salary": "20-25 LPA", "status": "closed"})
    assert r.status_code == 200
    body = r.json()
    assert body["salary"] == "20-25 LPA"
    assert body["status"] == "closed"
    assert body["title"] == job["title"]
    assert body["postedBy"] == job["postedBy"]


def test_update_job_rejects_owner_fields(recruiter, post_job):
    c, _ = recruiter
    job = post_job(c)
    r = c.put(f"{API}/jobs/{job['id']}", json={"postedBy": "someone-else"})
    assert r.status_code == 400


def test_cross_recruiter_update_forbidden_and_job_unchanged(register, post_job, db):
    owner, _ = register("company_recruiter", email="a@corp.com", company_name="A Corp")
    other, _ = register("company_recruiter", email="b@corp.com", company_name="B Corp")
    job = post_job(owner, title="Owned by A")
    before = db.jobs.find_one({"title": "Owned by A"})

    r = other.put(f"{API}/jobs/{job['id']}", json={"title": "Hijacked"})
    assert r.status_code == 403
    assert db.jobs.find_one({"_id": before["_id"]}) == before

    assert other.delete(f"{API}/jobs/{job['id']}").status_code == 403
    assert db.jobs.count_documents({}) == 1


def test_delete_job(client, recruiter, post_job):
    c, _ = recruiter
    job = post_job(c)
    r = c.delete(f"{API}/jobs/{job['id']}")
    assert r.status_code == 200
    assert client.get(f"{API}/jobs/{job['id']}").status_code == 404


def test_unknown_and_malformed_job_ids(client):
    assert client.get(f"{API}/jobs/64b7f0000000000000000000").status_code == 404
    r = client.get(f"{API}/jobs/not-an-id")
    assert r.status_code == 404
    assert "invalid ID format" in r.json()["detail"]


def test_my_jobs_lists_only_own_jobs(register, post_job):
    a, _ = register("company_recruiter", email="a@corp.com")
    b, _ = register("company_recruiter", email="b@corp.com")
    post_job(a, title="A1")
    closed = post_job(a, title="A2")
    a.put(f"{API}/jobs/{closed['id']}", json={"status": "closed"})
    post_job(b, title="B1")

    titles = [j["title"] for j in a.get(f"{API}/jobs/my-jobs").json()]
    assert titles == ["A2", "A1"]


def test_open_jobs_filter_combines_conditions():
    query = build_open_jobs_filter(JobFilters(search="py", category="Engineering", job_type="Remote"))
    assert query["status"] == "open"
    assert query["category"] == "Engineering"
    assert query["job_type"] == "Remote"
    assert {"title": {"$regex": "py", "$options": "i"}} in query["$or"]
