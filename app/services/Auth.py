from pymongo.errors import DuplicateKeyError

from app.helpers.Utilities import Utils
from app.models.User import UserModel
from app.schemas.Session import SessionContext
from app.schemas.User import SignInSchema, SignUpSchema, UserRole, UserSchema


class AuthService:
    def __init__(self):
        self.user_model = UserModel()

    def _session_payload(self, user: UserSchema) -> dict:
        public = user.public()
        return {
            "token": Utils.create_jwt_token(public),
            "user": public,
        }

    def sign_up(self, data: SignUpSchema) -> dict:
        try:
            if self.user_model.get_user({"email": data.email}):
                return {"success": False, "data": None, "error": "Email already registered"}
            user_id = self.user_model.create_user({
                "email": data.email,
                "password": data.password,
                "fullName": data.fullName,
                "role": UserRole.STUDENT,
            })
            user = self.user_model.get_user_by_id(str(user_id))
            return {
                "success": True,
                "data": self._session_payload(user)
            }
        except DuplicateKeyError:
            return {"success": False, "data": None, "error": "Email already registered"}
        except Exception as e:
            print(f"[Auth] sign up failed for {data.email}: {e}")
            return {
                "success": False,
                "data": None,
                "error": "Failed to create account"
            }

    def sign_in(self, data: SignInSchema) -> dict:
        try:
            user = self.user_model.get_user({"email": data.email})
            # Plaintext comparison against the stored value.
            if not user or user.password != data.password:
                return {"success": False, "data": None, "error": "Invalid email or password"}
            return {
                "success": True,
                "data": self._session_payload(user)
            }
        except Exception as e:
            print(f"[Auth] sign in failed for {data.email}: {e}")
            return {
                "success": False,
                "data": None,
                "error": "An error occurred during sign in"
            }

    def get_current_user(self, session: SessionContext) -> dict:
        try:
            user = self.user_model.get_user_by_id(session.userId)
            if not user:
                return {"success": False, "data": None, "error": "User not found"}
            return {"success": True, "data": user.public()}
        except Exception as e:
            print(f"[Auth] unable to load user {session.userId}: {e}")
            return {"success": False, "data": None, "error": "Failed to load user"}

    def ensure_admin(self, email: str, password: str, full_name: str = "Administrator") -> dict:
        """Create the administrator account on first start if it does not exist yet."""
        try:
            existing = self.user_model.get_user({"email": email})
            if existing:
                return {"success": True, "data": existing.id}
            user_id = self.user_model.create_user({
                "email": email,
                "password": password,
                "fullName": full_name,
                "role": UserRole.ADMIN,
            })
            return {"success": True, "data": str(user_id)}
        except Exception as e:
            return {"success": False, "data": None, "error": f"Failed to create admin: {str(e)}"}
