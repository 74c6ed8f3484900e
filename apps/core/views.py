from django.http import Http404
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.viewsets import ModelViewSet
from rest_framework import status
import logging

from apps.core.exceptions import build_error_payload

logger = logging.getLogger(__name__)


class BaseResponseMixin:
    """
    Standardizes the response format across the application.
    All responses will have the format:
    {
        "status": "success" | "error",
        "status_code": int,
        "message": str,
        "data": Any | None
    }
    """

    def success_response(
        self, data=None, message="Success", status_code=status.HTTP_200_OK
    ):
        """Send a success response"""
        response_data = {
            "status": "success",
            "status_code": status_code,
            "message": message,
            "data": data,
        }
        return Response(response_data, status=status_code)

    def error_response(
        self,
        message="An error occurred",
        status_code=status.HTTP_400_BAD_REQUEST,
        data=None,
    ):
        """Send an error response"""
        response_data = {
            "status": "error",
            "message": message,
            "data": data,
            "status_code": status_code,
        }
        return Response(response_data, status=status_code)

    def exception_response(self, exc: APIException):
        """Send an error response built from a raised API exception"""
        return Response(
            build_error_payload(exc, exc.status_code), status=exc.status_code
        )


class BaseViewSet(ModelViewSet, BaseResponseMixin):
    """
    Base ViewSet with standardized CRUD responses. Domain errors raised by the
    service layer (APIException subclasses) are turned into error envelopes.
    """

    # ------------------------------------
    # CREATE
    # ------------------------------------
    def create(self, request, *args, **kwargs):
        try:
            serializer = self.get_serializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            self.perform_create(serializer)
            return self.success_response(
                data=self.get_response_data(serializer.instance),
                message=f"{self.get_model_name()} created successfully",
                status_code=status.HTTP_201_CREATED,
            )
        except ValidationError as e:
            return self.error_response(
                message=e.detail,
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        except APIException as e:
            return self.exception_response(e)

    # ------------------------------------
    # UPDATE
    # ------------------------------------
    def update(self, request, *args, **kwargs):
        try:
            partial = kwargs.pop("partial", False)
            instance = self.get_object()
            serializer = self.get_serializer(
                instance, data=request.data, partial=partial
            )
            serializer.is_valid(raise_exception=True)
            self.perform_update(serializer)

            return self.success_response(
                data=self.get_response_data(serializer.instance),
                message=f"{self.get_model_name()} updated successfully",
            )
        except ValidationError as e:
            return self.error_response(
                message=e.detail,
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        except Http404:
            return self.error_response(
                message=f"{self.get_model_name()} not found",
                status_code=status.HTTP_404_NOT_FOUND,
            )
        except APIException as e:
            return self.exception_response(e)

    # ------------------------------------
    # DESTROY
    # ------------------------------------
    def destroy(self, request, *args, **kwargs):
        try:
            instance = self.get_object()
            self.perform_destroy(instance)

            return self.success_response(
                data={"id": instance.pk},
                message=f"{self.get_model_name()} deleted successfully",
            )
        except Http404:
            return self.error_response(
                message=f"{self.get_model_name()} not found",
                status_code=status.HTTP_404_NOT_FOUND,
            )
        except APIException as e:
            return self.exception_response(e)

    # ------------------------------------
    # LIST
    # ------------------------------------
    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)

        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = self.get_serializer(queryset, many=True)
        return self.success_response(
            data=serializer.data,
            message=f"{self.get_model_name()} list retrieved successfully",
        )

    # ------------------------------------
    # RETRIEVE
    # ------------------------------------
    def retrieve(self, request, *args, **kwargs):
        try:
            instance = self.get_object()
            serializer = self.get_serializer(instance)
            return self.success_response(
                data=serializer.data,
                message=f"{self.get_model_name()} retrieved successfully",
            )
        except Http404:
            return self.error_response(
                message=f"{self.get_model_name()} not found",
                status_code=status.HTTP_404_NOT_FOUND,
            )

    # ------------------------------------
    # HELPER
    # ------------------------------------
    def get_model_name(self) -> str:
        """
        Helper method to get the model name for messages.
        """
        return self.__class__.__name__.replace("ViewSet", "")

    def get_response_data(self, instance):
        """Serialized representation returned after a write."""
        return self.get_serializer(instance).data
