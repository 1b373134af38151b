import uuid

from locust import HttpUser, task, between

class DataroomUser(HttpUser):
    wait_time = between(1, 3)

    def on_start(self):
        payload = {"email": "load@dataroom.dev", "password": "password"}
        r = self.client.post("/api/auth/signup", json=payload)
        if r.status_code != 200:
            r = self.client.post("/api/auth/login", json=payload)
        token = r.json().get("access_token")
        self.headers = {"Authorization": f"Bearer {token}"}
        room = self.client.post(
            "/api/datarooms", json={"name": f"bench {uuid.uuid4().hex[:8]}"}, headers=self.headers
        )
        self.dataroom_id = room.json()["id"]

    @task(3)
    def browse_root(self):
        self.client.get(f"/api/datarooms/{self.dataroom_id}/children", headers=self.headers)

    @task(2)
    def search(self):
        self.client.get("/api/search", headers=self.headers)

    @task(1)
    def create_folder(self):
        data = {"name": f"bench {uuid.uuid4().hex[:8]}"}
        self.client.post(f"/api/datarooms/{self.dataroom_id}/folders", json=data, headers=self.headers)
