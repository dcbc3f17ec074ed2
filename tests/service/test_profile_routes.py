"""
Tests for the profile API routes.
"""

from sample_rows import OTHER_USER_ID, PUBLIC_BASE, SIGN_BASE, USER_ID, make_document, make_profile


# =============================================================================
# Own Profile
# =============================================================================


class TestGetOwnProfile:
    """Tests for GET /api/profile."""

    def test_returns_profile(self, client, auth_headers, mock_profiles_repo):
        mock_profiles_repo.get.return_value = make_profile()

        response = client.get("/api/profile", headers=auth_headers)

        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile["id"] == USER_ID
        assert profile["role"] == "candidate"
        assert profile["skills"] == ["React", "TypeScript"]
        mock_profiles_repo.get.assert_called_once_with(USER_ID)

    def test_missing_profile_returns_404(self, client, auth_headers, mock_profiles_repo):
        mock_profiles_repo.get.return_value = None

        response = client.get("/api/profile", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Profile not found."}

    def test_requires_auth(self, client, mock_profiles_repo):
        response = client.get("/api/profile")

        assert response.status_code == 401
        mock_profiles_repo.get.assert_not_called()


# =============================================================================
# Update Profile
# =============================================================================


class TestUpdateProfile:
    """Tests for POST /api/update-profile."""

    def test_updates_allowed_fields(self, client, auth_headers, mock_profiles_repo):
        mock_profiles_repo.update.return_value = make_profile(title="Staff Engineer")

        response = client.post(
            "/api/update-profile",
            headers=auth_headers,
            json={"updates": {"title": "Staff Engineer", "role": "recruiter", "id": OTHER_USER_ID}},
        )

        assert response.status_code == 200
        assert response.json()["profile"]["title"] == "Staff Engineer"
        mock_profiles_repo.update.assert_called_once_with(USER_ID, {"title": "Staff Engineer"})

    def test_null_list_field_becomes_empty_list(self, client, auth_headers, mock_profiles_repo):
        mock_profiles_repo.update.return_value = make_profile(certifications=[])

        client.post(
            "/api/update-profile",
            headers=auth_headers,
            json={"updates": {"certifications": None}},
        )

        mock_profiles_repo.update.assert_called_once_with(USER_ID, {"certifications": []})

    def test_malformed_list_field_returns_400(self, client, auth_headers, mock_profiles_repo):
        response = client.post(
            "/api/update-profile",
            headers=auth_headers,
            json={"updates": {"skills": "React, TypeScript"}},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "skills must be a list of strings"}
        mock_profiles_repo.update.assert_not_called()

    def test_only_protected_fields_returns_400(self, client, auth_headers):
        response = client.post(
            "/api/update-profile",
            headers=auth_headers,
            json={"updates": {"role": "recruiter"}},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No valid fields to update"}

    def test_missing_updates_returns_400(self, client, auth_headers):
        response = client.post("/api/update-profile", headers=auth_headers, json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing updates in request body"}

    def test_vanished_profile_returns_404(self, client, auth_headers, mock_profiles_repo):
        mock_profiles_repo.update.return_value = None

        response = client.post(
            "/api/update-profile",
            headers=auth_headers,
            json={"updates": {"bio": "Hello"}},
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Profile not found."}


# =============================================================================
# Upload Avatar
# =============================================================================


class TestUploadAvatar:
    """Tests for POST /api/upload-avatar."""

    def test_overwrites_avatar_and_sets_photo_url(
        self, client, auth_headers, mock_profiles_repo, mock_avatars_bucket
    ):
        mock_profiles_repo.update.side_effect = lambda user_id, fields: make_profile(**fields)

        response = client.post(
            "/api/upload-avatar",
            headers=auth_headers,
            files={"file": ("Me.JPG", b"\xff\xd8\xff", "image/jpeg")},
        )

        assert response.status_code == 200
        upload_args = mock_avatars_bucket.upload.call_args
        assert upload_args.args[0] == f"{USER_ID}/profile.jpg"
        assert upload_args.kwargs["upsert"] is True
        assert upload_args.kwargs["content_type"] == "image/jpeg"

        photo_url = response.json()["profile"]["photo_url"]
        assert photo_url.startswith(f"{PUBLIC_BASE}/avatars/{USER_ID}/profile.jpg?t=")

    def test_missing_file_returns_400(self, client, auth_headers, mock_avatars_bucket):
        response = client.post("/api/upload-avatar", headers=auth_headers, data={})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing file"}
        mock_avatars_bucket.upload.assert_not_called()

    def test_storage_error_returns_400(self, client, auth_headers, mock_profiles_repo, mock_avatars_bucket):
        mock_avatars_bucket.upload.side_effect = Exception("Bucket not found")

        response = client.post(
            "/api/upload-avatar",
            headers=auth_headers,
            files={"file": ("me.png", b"png", "image/png")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Bucket not found"}
        mock_profiles_repo.update.assert_not_called()


# =============================================================================
# Public Profile
# =============================================================================


class TestPublicProfile:
    """Tests for GET /api/public-profile/{user_id}."""

    def test_returns_profile_with_signed_public_documents(
        self, client, mock_profiles_repo, mock_documents_repo
    ):
        doc = make_document(id=3, visibility="public")
        mock_profiles_repo.get.return_value = make_profile()
        mock_documents_repo.list_for_user.return_value = [doc]

        response = client.get(f"/api/public-profile/{USER_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["name"] == "Ada Lovelace"
        assert data["documents"][0]["public_url"] == (
            f"{SIGN_BASE}/documents/{doc['file_path']}?token=signed-600"
        )
        mock_documents_repo.list_for_user.assert_called_once_with(USER_ID, visibility="public")

    def test_cleans_trailing_backslashes(self, client, mock_profiles_repo, mock_documents_repo):
        mock_profiles_repo.get.return_value = make_profile()
        mock_documents_repo.list_for_user.return_value = []

        response = client.get(f"/api/public-profile/{USER_ID}%5C%5C")

        assert response.status_code == 200
        mock_profiles_repo.get.assert_called_once_with(USER_ID)

    def test_signing_failure_uses_public_url(
        self, client, mock_profiles_repo, mock_documents_repo, mock_documents_bucket
    ):
        doc = make_document(id=3, visibility="public")
        mock_profiles_repo.get.return_value = make_profile()
        mock_documents_repo.list_for_user.return_value = [doc]
        mock_documents_bucket.create_signed_url.side_effect = Exception("not allowed")

        response = client.get(f"/api/public-profile/{USER_ID}")

        assert response.json()["documents"][0]["public_url"] == (
            f"{PUBLIC_BASE}/documents/{doc['file_path']}"
        )

    def test_document_without_path_has_no_url(
        self, client, mock_profiles_repo, mock_documents_repo, mock_documents_bucket
    ):
        mock_profiles_repo.get.return_value = make_profile()
        mock_documents_repo.list_for_user.return_value = [
            make_document(id=3, visibility="public", file_path=None),
            make_document(id=4, visibility="public"),
        ]

        response = client.get(f"/api/public-profile/{USER_ID}")

        assert response.status_code == 200
        docs = response.json()["documents"]
        assert docs[0]["public_url"] is None
        assert docs[1]["public_url"].startswith(SIGN_BASE)
        mock_documents_bucket.create_signed_url.assert_called_once()

    def test_document_error_still_returns_profile(self, client, mock_profiles_repo, mock_documents_repo):
        mock_profiles_repo.get.return_value = make_profile()
        mock_documents_repo.list_for_user.side_effect = Exception("permission denied")

        response = client.get(f"/api/public-profile/{USER_ID}")

        assert response.status_code == 200
        assert response.json()["documents"] == []

    def test_unknown_profile_returns_404(self, client, mock_profiles_repo):
        mock_profiles_repo.get.return_value = None

        response = client.get(f"/api/public-profile/{OTHER_USER_ID}")

        assert response.status_code == 404
        assert response.json() == {"error": "Profile not found."}
