import pytest
from httpx import AsyncClient
from sqlmodel import Session

from enrollment_admin.config import settings
from enrollment_admin.models import CourseLevel
from enrollment_admin.services import workflow


@pytest.mark.asyncio
async def test_login_flow(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401

    response = await client.post("/api/auth/login", data={"username": settings.ADMIN_USERNAME, "password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect username or password"}

    response = await client.post(
        "/api/auth/login",
        data={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "username": settings.ADMIN_USERNAME}

    response = await client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json() == {"username": settings.ADMIN_USERNAME}

    response = await client.get("/api/admin/notifications")
    assert response.status_code == 200

    await client.post("/api/auth/logout")
    response = await client.get("/api/admin/notifications")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_notification_toggle(admin_client: AsyncClient):
    response = await admin_client.get("/api/admin/notifications")
    assert response.json() == {"enabled": True}

    response = await admin_client.post("/api/admin/notifications", json={"enabled": False})
    assert response.status_code == 200
    assert response.json() == {"success": True, "enabled": False}

    response = await admin_client.get("/api/admin/notifications")
    assert response.json() == {"enabled": False}


@pytest.mark.asyncio
async def test_notification_toggle_requires_boolean(admin_client: AsyncClient):
    response = await admin_client.post("/api/admin/notifications", json={"enabled": "yes"})
    assert response.status_code == 400

    response = await admin_client.post("/api/admin/notifications", json={})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_disabled_notifications_skip_submission_email(admin_client: AsyncClient, make_course, notifier):
    course = make_course()
    await admin_client.post("/api/admin/notifications", json={"enabled": False})

    response = await admin_client.post(
        "/api/enroll",
        json={"first_name": "Ada", "last_name": "Lovelace", "email": "a@x.com", "course_id": course.id},
    )
    assert response.status_code == 201

    await admin_client.post(f"/api/requests/{response.json()['id']}/reject")
    assert notifier.kinds() == ["rejection"]


@pytest.mark.asyncio
async def test_stats(session: Session, admin_client: AsyncClient, make_course, enrollment_data):
    spanish = make_course("Spanish I")
    make_course("Spanish III", level=CourseLevel.ADVANCED)
    approved = workflow.submit_request(session, enrollment_data(spanish.id))
    workflow.approve_request(session, approved.id)
    workflow.submit_request(session, enrollment_data(spanish.id, email="b@x.com"))

    response = await admin_client.get("/api/admin/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["total_students"] == 1
    assert data["active_students"] == 1
    assert data["total_courses"] == 2
    assert data["open_courses"] == 2
    assert data["pending_requests"] == 1
    assert data["approved_requests"] == 1
    assert data["rejected_requests"] == 0
    assert data["total_waitlist"] == 1
    assert data["courses_by_level"] == {"Beginner": 1, "Intermediate": 0, "Advanced": 1}


@pytest.mark.asyncio
async def test_students_listing(session: Session, admin_client: AsyncClient, make_course, enrollment_data):
    course = make_course()
    for email, last_name in [("a@x.com", "Lovelace"), ("g@x.com", "Hopper")]:
        request = workflow.submit_request(session, enrollment_data(course.id, email=email, last_name=last_name))
        workflow.approve_request(session, request.id)

    response = await admin_client.get("/api/students/")
    assert response.status_code == 200
    data = response.json()
    assert [s["last_name"] for s in data] == ["Hopper", "Lovelace"]
    assert data[0]["courses"][0]["title"] == "Spanish I"

    response = await admin_client.get("/api/students/", params={"q": "hopp"})
    assert [s["email"] for s in response.json()] == ["g@x.com"]

    response = await admin_client.get(f"/api/students/{data[0]['id']}")
    assert response.json()["email"] == "g@x.com"

    response = await admin_client.get("/api/students/999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_students_require_admin(client: AsyncClient):
    response = await client.get("/api/students/")
    assert response.status_code == 401
