"""
HTTP surface, run against both storage backends
"""

REVIEW = {
    "rating": 4,
    "title": "Holds up",
    "content": "Still gripping on a rewatch, and the score does a lot of the heavy lifting.",
}

MOVIE = {
    "title": "Arrival",
    "synopsis": "A linguist works with the military to communicate with alien lifeforms.",
    "director": "Denis Villeneuve",
    "cast": ["Amy Adams", "Jeremy Renner"],
    "genres": ["drama", "science_fiction"],
    "release_year": 2016,
    "duration": 116,
}

UNAUTHENTICATED = (401, 403)


def register(client, username="newcomer", email="newcomer@example.com", password="Secret123"):
    return client.post("/api/auth/register", json={
        "username": username,
        "email": email,
        "password": password,
    })


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_reports_storage(self, client):
        body = client.get("/health").json()
        assert body["storage"] in ("MemoryStorage", "SqlStorage")

    def test_security_headers(self, client):
        response = client.get("/")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestAuth:

    def test_register_login_me(self, client):
        response = register(client)
        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "newcomer"
        assert "password_hash" not in body and "password" not in body

        login = client.post("/api/auth/login", json={"username": "newcomer", "password": "Secret123"})
        assert login.status_code == 200
        token = login.json()
        assert token["token_type"] == "bearer"
        assert token["user"]["id"] == body["id"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "newcomer@example.com"

    def test_duplicate_username_and_email(self, client):
        register(client)
        assert register(client, email="other@example.com").status_code == 409
        assert register(client, username="someone_else").status_code == 409

    def test_wrong_password(self, client):
        register(client)
        response = client.post("/api/auth/login", json={"username": "newcomer", "password": "Wrong1234"})
        assert response.status_code == 401

    def test_weak_password_rejected(self, client):
        assert register(client, password="password").status_code == 422

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code in UNAUTHENTICATED
        bad = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert bad.status_code == 401

    def test_update_profile(self, client, auth_headers, make_user):
        make_user("taken")

        response = client.patch("/api/auth/me", json={"profile_picture": "/me.png"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["profile_picture"] == "/me.png"

        clash = client.patch("/api/auth/me", json={"username": "taken"}, headers=auth_headers)
        assert clash.status_code == 409


class TestMovies:

    def test_new_movie_has_zero_rating(self, client, auth_headers):
        response = client.post("/api/movies", json=MOVIE, headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["average_rating"] == "0"
        assert body["review_count"] == 0

    def test_create_movie_requires_auth(self, client):
        assert client.post("/api/movies", json=MOVIE).status_code in UNAUTHENTICATED

    def test_duplicate_tmdb_id(self, client, auth_headers):
        payload = {**MOVIE, "tmdb_id": 329865}
        assert client.post("/api/movies", json=payload, headers=auth_headers).status_code == 201
        assert client.post("/api/movies", json=payload, headers=auth_headers).status_code == 409

    def test_list_movies(self, client, make_movie):
        make_movie("Drama 2008", release_year=2008)
        make_movie("Drama 2024", release_year=2024)
        make_movie("Drama 2023", release_year=2023)

        response = client.get("/api/movies", params={"genre": "drama", "sort": "year", "limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [m["release_year"] for m in body["movies"]] == [2024, 2023]

        page_two = client.get("/api/movies", params={"genre": "drama", "sort": "year", "limit": 2, "page": 2})
        assert [m["release_year"] for m in page_two.json()["movies"]] == [2008]

    def test_invalid_query_params(self, client):
        assert client.get("/api/movies", params={"page": 0}).status_code == 422
        assert client.get("/api/movies", params={"limit": 101}).status_code == 422
        assert client.get("/api/movies", params={"genre": "space-opera"}).status_code == 422
        assert client.get("/api/movies", params={"sort": "popularity"}).status_code == 422
        assert client.get("/api/movies", params={"min_rating": 6}).status_code == 422

    def test_genres(self, client):
        genres = client.get("/api/movies/genres").json()["genres"]
        assert "drama" in genres and "science_fiction" in genres

    def test_featured_and_trending(self, client, make_movie):
        make_movie("Featured", featured=True)
        make_movie("Trending", trending=True)

        assert [m["title"] for m in client.get("/api/movies/featured").json()] == ["Featured"]
        assert [m["title"] for m in client.get("/api/movies/trending").json()] == ["Trending"]

    def test_movie_detail(self, client, make_movie, make_user, make_review):
        movie = make_movie("Detail")
        make_review(make_user("reviewer"), movie, rating=5)

        response = client.get(f"/api/movies/{movie.id}")
        assert response.status_code == 200
        body = response.json()
        assert body["average_rating"] == "5.00"
        assert body["reviews"][0]["user"]["username"] == "reviewer"
        assert body["reviews"][0]["movie"]["title"] == "Detail"

    def test_unknown_movie(self, client):
        assert client.get("/api/movies/missing").status_code == 404
        assert client.get("/api/movies/missing/reviews").status_code == 404
        assert client.get("/api/movies/missing/stats").status_code == 404

    def test_curation_update(self, client, auth_headers, make_movie):
        movie = make_movie()

        response = client.patch(f"/api/movies/{movie.id}", json={"featured": True}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["featured"] is True
        assert response.json()["average_rating"] == "0"

        assert client.patch("/api/movies/missing", json={"featured": True}, headers=auth_headers).status_code == 404


class TestReviews:

    def test_review_moves_rating(self, client, auth_headers, make_movie):
        movie = make_movie()

        response = client.post(f"/api/movies/{movie.id}/reviews", json=REVIEW, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["likes"] == 0

        detail = client.get(f"/api/movies/{movie.id}").json()
        assert detail["average_rating"] == "4.00"
        assert detail["review_count"] == 1

        stats = client.get(f"/api/movies/{movie.id}/stats").json()
        assert stats["total_ratings"] == 1
        assert stats["rating_distribution"]["4"] == 1

    def test_second_review_conflicts(self, client, auth_headers, make_movie):
        movie = make_movie()
        client.post(f"/api/movies/{movie.id}/reviews", json=REVIEW, headers=auth_headers)

        response = client.post(f"/api/movies/{movie.id}/reviews", json=REVIEW, headers=auth_headers)
        assert response.status_code == 409

    def test_review_validation(self, client, auth_headers, make_movie):
        movie = make_movie()
        url = f"/api/movies/{movie.id}/reviews"

        assert client.post(url, json={**REVIEW, "rating": 6}, headers=auth_headers).status_code == 422
        assert client.post(url, json={**REVIEW, "content": "Too short."}, headers=auth_headers).status_code == 422
        assert client.post("/api/movies/missing/reviews", json=REVIEW, headers=auth_headers).status_code == 404

    def test_review_requires_auth(self, client, make_movie):
        movie = make_movie()
        response = client.post(f"/api/movies/{movie.id}/reviews", json=REVIEW)
        assert response.status_code in UNAUTHENTICATED

    def test_edit_and_delete_own_review(self, client, store, auth_user, auth_headers, make_movie, make_review):
        movie = make_movie()
        review = make_review(auth_user, movie, rating=2)

        edited = client.put(f"/api/reviews/{review.id}", json={"rating": 5}, headers=auth_headers)
        assert edited.status_code == 200
        assert edited.json()["rating"] == 5
        assert str(store.get_movie(movie.id).average_rating) == "5.00"

        assert client.delete(f"/api/reviews/{review.id}", headers=auth_headers).status_code == 204
        assert client.delete(f"/api/reviews/{review.id}", headers=auth_headers).status_code == 404
        assert client.get(f"/api/movies/{movie.id}").json()["average_rating"] == "0"

    def test_cannot_touch_others_reviews(self, client, auth_headers, make_user, make_movie, make_review):
        review = make_review(make_user("author"), make_movie())

        assert client.put(f"/api/reviews/{review.id}", json={"rating": 1}, headers=auth_headers).status_code == 403
        assert client.delete(f"/api/reviews/{review.id}", headers=auth_headers).status_code == 403

    def test_like(self, client, make_user, make_movie, make_review):
        review = make_review(make_user(), make_movie())

        client.post(f"/api/reviews/{review.id}/like")
        response = client.post(f"/api/reviews/{review.id}/like")

        assert response.status_code == 200
        assert response.json()["likes"] == 2
        assert client.post("/api/reviews/missing/like").status_code == 404


class TestWatchlist:

    def test_add_check_remove(self, client, auth_headers, make_movie):
        movie = make_movie("Later")

        added = client.post("/api/watchlist", json={"movie_id": movie.id}, headers=auth_headers)
        assert added.status_code == 201

        check = client.get(f"/api/watchlist/check/{movie.id}", headers=auth_headers).json()
        assert check == {"movie_id": movie.id, "in_watchlist": True, "item_id": added.json()["id"]}

        listing = client.get("/api/watchlist", headers=auth_headers).json()
        assert [w["movie"]["title"] for w in listing] == ["Later"]

        assert client.delete(f"/api/watchlist/{movie.id}", headers=auth_headers).status_code == 204
        assert client.delete(f"/api/watchlist/{movie.id}", headers=auth_headers).status_code == 404

    def test_duplicate_conflicts(self, client, auth_headers, make_movie):
        movie = make_movie()
        client.post("/api/watchlist", json={"movie_id": movie.id}, headers=auth_headers)

        response = client.post("/api/watchlist", json={"movie_id": movie.id}, headers=auth_headers)
        assert response.status_code == 409
        assert client.get("/api/watchlist/stats", headers=auth_headers).json()["total_items"] == 1

    def test_unknown_movie(self, client, auth_headers):
        response = client.post("/api/watchlist", json={"movie_id": "missing"}, headers=auth_headers)
        assert response.status_code == 404

    def test_requires_auth(self, client):
        assert client.get("/api/watchlist").status_code in UNAUTHENTICATED


class TestUsers:

    def test_public_profile_views(self, client, store, make_user, make_movie, make_review):
        user = make_user("public")
        movie = make_movie("Seen")
        make_review(user, movie, rating=3)
        store.create_watchlist_entry({"user_id": user.id, "movie_id": make_movie("Unseen").id})

        profile = client.get(f"/api/users/{user.id}").json()
        assert profile["username"] == "public"
        assert "password_hash" not in profile

        reviews = client.get(f"/api/users/{user.id}/reviews").json()
        assert [r["movie"]["title"] for r in reviews] == ["Seen"]

        watchlist = client.get(f"/api/users/{user.id}/watchlist").json()
        assert [w["movie"]["title"] for w in watchlist] == ["Unseen"]

        stats = client.get(f"/api/users/{user.id}/stats").json()
        assert stats["total_ratings"] == 1
        assert stats["average_rating"] == "3.00"

    def test_unknown_user(self, client):
        assert client.get("/api/users/missing").status_code == 404
        assert client.get("/api/users/missing/reviews").status_code == 404
        assert client.get("/api/users/missing/watchlist").status_code == 404
