"""ASGI application for PantryPal."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from time import perf_counter
from typing import Any, Optional, Union
from uuid import uuid4

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field, field_validator

from pantrypal import __version__, metrics
from pantrypal.alerts import build_alerts, restock_suggestions
from pantrypal.config import Settings, get_settings
from pantrypal.db.pantry import UnknownCategoryError
from pantrypal.db.users import (
    MAX_PASSWORD_BYTES,
    EmailAlreadyRegisteredError,
    authenticate_user,
    purge_expired_sessions,
    register_user,
    revoke_token,
)
from pantrypal.logging_utils import configure_logging as configure_app_logging
from pantrypal.models.pantry import Category, PantryAlert, PantryItem
from pantrypal.models.recipes import (
    Recipe,
    RecipeListResponse,
    RecipeSource,
    SavedRecipe,
    SuggestionResponse,
)
from pantrypal.models.shopping import ShoppingListItem, ShoppingSuggestions
from pantrypal.models.users import AuthResponse, User
from pantrypal.recipes.suggestions import SuggestionService
from pantrypal.server import deps

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    normalized: list[dict[str, Any]] = []
    for error in errors:
        normalized.append({key: _json_safe(value) for key, value in error.items()})
    return normalized


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.recipe_api_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def _not_found(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _access_fields(
    request_id: str, method: str, path: str, status_code: int, duration_ms: float
) -> dict[str, Any]:
    return {
        "request_id": request_id,
        "method": method,
        "path": path,
        "status": status_code,
        "duration_ms": round(duration_ms, 2),
    }


def _require_update_fields(payload: dict[str, Any]) -> None:
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update",
        )


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="PantryPal", version=__version__)

    if settings.session_cleanup_enabled:
        session_scheduler = AsyncIOScheduler()
        session_scheduler.add_job(
            purge_expired_sessions,
            "interval",
            seconds=settings.session_cleanup_interval,
            max_instances=1,
            coalesce=True,
        )

        @application.on_event("startup")
        async def start_session_cleanup() -> None:
            purge_expired_sessions()
            session_scheduler.start()

        @application.on_event("shutdown")
        async def stop_session_cleanup() -> None:
            session_scheduler.shutdown(wait=False)

    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("pantrypal.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra=_access_fields(request_id, method, path, 500, duration_ms),
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra=_access_fields(request_id, method, path, response.status_code, duration_ms),
            )
            try:
                metrics.REQUEST_COUNT.labels(
                    method=method,
                    path=path,
                    status=str(response.status_code),
                ).inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
            except Exception:  # pragma: no cover - metrics best effort
                pass
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_preview: str | None = None
        try:
            raw_body = await request.body()
            if raw_body:
                decoded = raw_body.decode("utf-8", errors="replace")
                if len(decoded) > 2048:
                    decoded = decoded[:2048] + "...(truncated)"
                body_preview = decoded
        except Exception:  # pragma: no cover - body already consumed
            body_preview = "<unable to read body>"

        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s | body=%s",
            request.method,
            request.url.path,
            exc.errors(),
            body_preview,
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.get("/api/health", summary="Service health check")
    def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    # Auth

    @application.post(
        "/api/auth/register",
        response_model=AuthResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Create an account",
    )
    def auth_register(payload: RegisterRequest) -> AuthResponse:
        try:
            user, token = register_user(
                email=payload.email, password=payload.password, name=payload.name
            )
        except EmailAlreadyRegisteredError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return AuthResponse(user=user, token=token)

    @application.post("/api/auth/login", response_model=AuthResponse, summary="Log in")
    def auth_login(payload: LoginRequest) -> AuthResponse:
        result = authenticate_user(email=payload.email, password=payload.password)
        if result is None:
            logger.info("Rejected login attempt")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )
        user, token = result
        return AuthResponse(user=user, token=token)

    @application.get("/api/auth/me", response_model=User, summary="Current user")
    def auth_me(user: User = Depends(deps.get_current_user)) -> User:
        return user

    @application.post(
        "/api/auth/logout",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Revoke the presented token",
    )
    def auth_logout(
        user: User = Depends(deps.get_current_user),
        token: str = Depends(deps.get_bearer_token),
    ) -> None:
        revoke_token(token)
        logger.debug("Revoked session for user id=%s", user.id)

    # Categories

    @application.get(
        "/api/categories",
        response_model=list[Category],
        summary="List pantry categories",
    )
    def categories_list(
        provider: deps.CategoryProvider = Depends(deps.get_category_provider),
    ) -> list[Category]:
        return provider()

    # Pantry

    @application.get(
        "/api/pantry",
        response_model=list[PantryItem],
        summary="List pantry items",
    )
    def pantry_list(
        user: User = Depends(deps.get_current_user),
        provider: deps.PantryProvider = Depends(deps.get_pantry_provider),
    ) -> list[PantryItem]:
        return provider(user.id)

    @application.get(
        "/api/pantry/expiring",
        response_model=list[PantryItem],
        summary="List items expiring soon",
    )
    def pantry_expiring(
        user: User = Depends(deps.get_current_user),
        provider: deps.ExpiringPantryProvider = Depends(deps.get_expiring_pantry_provider),
    ) -> list[PantryItem]:
        return provider(user.id)

    @application.get(
        "/api/pantry/alerts",
        response_model=list[PantryAlert],
        summary="Expiry and low-stock alerts",
    )
    def pantry_alerts(
        today: Optional[date] = Query(default=None),
        user: User = Depends(deps.get_current_user),
        provider: deps.PantryProvider = Depends(deps.get_pantry_provider),
        app_settings: Settings = Depends(deps.get_app_settings),
    ) -> list[PantryAlert]:
        return build_alerts(
            provider(user.id),
            today=today,
            window_days=app_settings.expiring_window_days,
            low_stock_threshold=app_settings.low_stock_threshold,
        )

    @application.post(
        "/api/pantry",
        response_model=PantryItem,
        status_code=status.HTTP_201_CREATED,
        summary="Add a pantry item",
    )
    def pantry_create(
        payload: PantryCreateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        creator: deps.PantryCreator = Depends(deps.get_pantry_creator),
    ) -> PantryItem:
        create_payload = payload.model_dump()
        logger.debug("Creating pantry item payload=%s", create_payload)
        try:
            return creator(user.id, create_payload)
        except UnknownCategoryError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    @application.put(
        "/api/pantry/{item_id}",
        response_model=PantryItem,
        summary="Update a pantry item",
    )
    def pantry_update(
        item_id: int,
        payload: PantryUpdateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        updater: deps.PantryUpdater = Depends(deps.get_pantry_updater),
    ) -> PantryItem:
        update_payload = payload.model_dump(exclude_unset=True)
        _require_update_fields(update_payload)
        logger.debug("Updating pantry item %s with payload=%s", item_id, update_payload)
        try:
            return updater(user.id, item_id, update_payload)
        except UnknownCategoryError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.delete(
        "/api/pantry/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a pantry item",
    )
    def pantry_delete(
        item_id: int,
        user: User = Depends(deps.get_current_user),
        deleter: deps.PantryDeleter = Depends(deps.get_pantry_deleter),
    ) -> None:
        try:
            deleter(user.id, item_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    # Recipes

    @application.get(
        "/api/recipes/suggestions",
        response_model=SuggestionResponse,
        summary="Recipes ranked by pantry coverage",
    )
    def recipes_suggestions(
        user: User = Depends(deps.get_current_user),
        names_provider: deps.PantryNamesProvider = Depends(deps.get_pantry_names_provider),
        service: SuggestionService = Depends(deps.get_suggestion_service),
    ) -> SuggestionResponse:
        return service.suggest(names_provider(user.id))

    @application.get(
        "/api/recipes/search/{ingredient}",
        response_model=RecipeListResponse,
        summary="Search recipes by ingredient",
    )
    def recipes_search(
        ingredient: str,
        user: User = Depends(deps.get_current_user),
        service: SuggestionService = Depends(deps.get_suggestion_service),
    ) -> RecipeListResponse:
        return RecipeListResponse(recipes=service.search(ingredient))

    @application.get(
        "/api/recipes/random/inspiration",
        response_model=Recipe,
        summary="A random recipe",
    )
    def recipes_random(
        user: User = Depends(deps.get_current_user),
        service: SuggestionService = Depends(deps.get_suggestion_service),
    ) -> Recipe:
        recipe = service.random_inspiration()
        if recipe is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No recipes available")
        return recipe

    @application.get(
        "/api/recipes/saved/all",
        response_model=list[SavedRecipe],
        summary="List saved recipes",
    )
    def recipes_saved_list(
        user: User = Depends(deps.get_current_user),
        provider: deps.SavedRecipeProvider = Depends(deps.get_saved_recipe_provider),
    ) -> list[SavedRecipe]:
        return provider(user.id)

    @application.post(
        "/api/recipes/save",
        response_model=SavedRecipe,
        status_code=status.HTTP_201_CREATED,
        summary="Save a recipe",
    )
    def recipes_save(
        response: Response,
        payload: SaveRecipeRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        storer: deps.SavedRecipeStorer = Depends(deps.get_saved_recipe_storer),
    ) -> SavedRecipe:
        saved, created = storer(user.id, payload.model_dump())
        if not created:
            response.status_code = status.HTTP_200_OK
        return saved

    @application.delete(
        "/api/recipes/saved/{saved_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a saved recipe",
    )
    def recipes_saved_delete(
        saved_id: int,
        user: User = Depends(deps.get_current_user),
        deleter: deps.SavedRecipeDeleter = Depends(deps.get_saved_recipe_deleter),
    ) -> None:
        try:
            deleter(user.id, saved_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.get(
        "/api/recipes/{recipe_id}",
        response_model=Recipe,
        summary="Recipe details",
    )
    def recipes_detail(
        recipe_id: str,
        source: Optional[RecipeSource] = Query(default=None),
        user: User = Depends(deps.get_current_user),
        service: SuggestionService = Depends(deps.get_suggestion_service),
    ) -> Recipe:
        recipe = service.lookup(recipe_id, source=source)
        if recipe is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
        return recipe

    # Shopping list

    @application.get(
        "/api/shopping-list",
        response_model=list[ShoppingListItem],
        summary="List shopping list items",
    )
    def shopping_list_list(
        user: User = Depends(deps.get_current_user),
        provider: deps.ShoppingListProvider = Depends(deps.get_shopping_list_provider),
    ) -> list[ShoppingListItem]:
        return provider(user.id)

    @application.get(
        "/api/shopping-list/suggestions",
        response_model=ShoppingSuggestions,
        summary="Pantry items worth restocking",
    )
    def shopping_list_suggestions(
        user: User = Depends(deps.get_current_user),
        pantry_provider: deps.PantryProvider = Depends(deps.get_pantry_provider),
        list_provider: deps.ShoppingListProvider = Depends(deps.get_shopping_list_provider),
        app_settings: Settings = Depends(deps.get_app_settings),
    ) -> ShoppingSuggestions:
        return restock_suggestions(
            pantry_provider(user.id),
            list_provider(user.id),
            window_days=app_settings.expiring_window_days,
            low_stock_threshold=app_settings.low_stock_threshold,
        )

    @application.post(
        "/api/shopping-list",
        response_model=ShoppingListItem,
        status_code=status.HTTP_201_CREATED,
        summary="Create shopping list item",
    )
    def shopping_list_create(
        payload: ShoppingListCreateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        creator: deps.ShoppingListCreator = Depends(deps.get_shopping_list_creator),
    ) -> ShoppingListItem:
        return creator(user.id, payload.model_dump())

    @application.post(
        "/api/shopping-list/reset",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Reset shopping list",
    )
    def shopping_list_reset(
        user: User = Depends(deps.get_current_user),
        resetter: deps.ShoppingListResetter = Depends(deps.get_shopping_list_resetter),
    ) -> None:
        resetter(user.id)

    @application.post(
        "/api/shopping-list/clear-checked",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove checked items",
    )
    def shopping_list_clear_checked(
        user: User = Depends(deps.get_current_user),
        clearer: deps.ShoppingListCheckedClearer = Depends(
            deps.get_shopping_list_checked_clearer
        ),
    ) -> None:
        removed = clearer(user.id)
        logger.debug("Cleared %s checked shopping item(s) for user id=%s", removed, user.id)

    @application.put(
        "/api/shopping-list/{item_id}",
        response_model=ShoppingListItem,
        summary="Update shopping list item",
    )
    def shopping_list_update(
        item_id: int,
        payload: ShoppingListUpdateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        updater: deps.ShoppingListUpdater = Depends(deps.get_shopping_list_updater),
    ) -> ShoppingListItem:
        update_payload = payload.model_dump(exclude_unset=True)
        _require_update_fields(update_payload)
        try:
            return updater(user.id, item_id, update_payload)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.delete(
        "/api/shopping-list/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete shopping list item",
    )
    def shopping_list_delete(
        item_id: int,
        user: User = Depends(deps.get_current_user),
        deleter: deps.ShoppingListDeleter = Depends(deps.get_shopping_list_deleter),
    ) -> None:
        try:
            deleter(user.id, item_id)
        except ValueError as exc:
            raise _not_found(exc) from exc

    @application.post(
        "/api/shopping-list/{item_id}/add-to-inventory",
        response_model=PantryItem,
        status_code=status.HTTP_201_CREATED,
        summary="Move a shopping item into the pantry",
    )
    def shopping_list_add_to_inventory(
        item_id: int,
        payload: ShoppingListAddToPantryRequest | None = Body(default=None),
        user: User = Depends(deps.get_current_user),
        mover: deps.ShoppingListMover = Depends(deps.get_shopping_list_mover),
    ) -> PantryItem:
        overrides = payload.model_dump(exclude_unset=True) if payload else {}
        try:
            return mover(user.id, item_id, overrides)
        except UnknownCategoryError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except ValueError as exc:
            raise _not_found(exc) from exc

    return application


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    name: str = Field(min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        local, _, domain = normalized.partition("@")
        if not local or "." not in domain:
            raise ValueError("A valid email address is required")
        return normalized

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Name is required")
        return stripped


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=72)


class PantryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: float = Field(default=1.0, ge=0)
    unit: str = Field(default="piece", min_length=1, max_length=64)
    category_id: Optional[int] = Field(default=None, ge=1)
    expiry_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class PantryUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=64)
    category_id: Optional[int] = Field(default=None, ge=1)
    expiry_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name", "quantity", "unit")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value


class SaveRecipeRequest(BaseModel):
    recipe_api_id: Union[int, str]
    title: str = Field(min_length=1, max_length=255)
    image_url: Optional[str] = Field(default=None, max_length=1024)
    source: Optional[RecipeSource] = None

    @field_validator("recipe_api_id")
    @classmethod
    def stringify_id(cls, value: Union[int, str]) -> str:
        text = str(value).strip()
        if not text:
            raise ValueError("recipe_api_id is required")
        return text


class ShoppingListCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=64)
    category: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=500)


class ShoppingListUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    quantity: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=64)
    category: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=500)
    is_checked: Optional[bool] = Field(default=None)

    @field_validator("name", "is_checked")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value


class ShoppingListAddToPantryRequest(BaseModel):
    quantity: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=64)
    category_id: Optional[int] = Field(default=None, ge=1)
    expiry_date: Optional[date] = Field(default=None)


RegisterRequest.model_rebuild()
PantryCreateRequest.model_rebuild()
ShoppingListAddToPantryRequest.model_rebuild()


app = create_app()

__all__ = ["app", "create_app"]
