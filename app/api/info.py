"""Informational and volume checking endpoints."""

import socket

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from app.api.deps import get_datasource
from app.apitester.core.files import create_file, list_files
from app.config import DatasourceConfig, Settings, get_settings

router = APIRouter(tags=["info"])


@router.get("/hello", response_class=PlainTextResponse)
def hello() -> str:
    return "Welcome to Kubernetes Another Class"


@router.get("/hostname", response_class=PlainTextResponse)
def hostname() -> str:
    return socket.gethostname()


@router.get("/version", response_class=PlainTextResponse)
def version(settings: Settings = Depends(get_settings)) -> str:
    return f"[App Version] : {settings.APPLICATION_VERSION}"


@router.get("/info", response_class=HTMLResponse)
def info(
    settings: Settings = Depends(get_settings),
    datasource: DatasourceConfig = Depends(get_datasource),
) -> str:
    """Dump version, profile, role and the resolved datasource."""
    return (
        f"<b>[Version] :</b> {settings.APPLICATION_VERSION}<br>"
        f"<b>[Profile] :</b> {settings.SPRING_PROFILES_ACTIVE}<br>"
        f"<b>[Role] :</b> {settings.APPLICATION_ROLE} "
        "(option: ALL, GET, POST, PUT, DELETE)<br>"
        "<b>[Database]</b><br>"
        f"driver-class-name : {datasource.driver_class_name}<br>"
        f"url : {datasource.url}<br>"
        f"username : {datasource.username}<br>"
        f"password : {datasource.password.get_secret_value()}"
    )


@router.get("/properties", response_class=HTMLResponse)
def properties(settings: Settings = Depends(get_settings)) -> str:
    """Dump the configuration schema and the current volume paths."""
    nbsp = "&nbsp;&nbsp;"
    return (
        f"<b>[Application profile] : </b> {settings.SPRING_PROFILES_ACTIVE}<br>"
        f"<b>Volume path :</b> {settings.VOLUME_PATH_PERSISTENT_VOLUME_DATA}<br><br>"
        "<b>application.yaml :</b> Common properties<br>---<br>"
        f"datasource:<br>{nbsp}driver-class-name:<br>{nbsp}url:<br>"
        f"{nbsp}username:<br>{nbsp}password:<br>"
        f'application:<br>{nbsp}role:&nbsp;"ALL"<br>'
        f'{nbsp}version:&nbsp;"Api Tester v1.0.0"<br><br>'
        f"postgresql:<br>{nbsp}filepath:<br><br>"
        "<b>Current Config:</b><br>"
        f"PV Path: {settings.VOLUME_PATH_PERSISTENT_VOLUME_DATA}<br>"
        f"Pod Path: {settings.VOLUME_PATH_POD_VOLUME_DATA}"
    )


@router.get("/create-file-pv", response_class=PlainTextResponse)
def create_file_pv(settings: Settings = Depends(get_settings)) -> str:
    return create_file(settings.VOLUME_PATH_PERSISTENT_VOLUME_DATA)


@router.get("/list-file-pv", response_class=PlainTextResponse)
def list_file_pv(settings: Settings = Depends(get_settings)) -> str:
    return list_files(settings.VOLUME_PATH_PERSISTENT_VOLUME_DATA)


@router.get("/create-file-pod", response_class=PlainTextResponse)
def create_file_pod(settings: Settings = Depends(get_settings)) -> str:
    return create_file(settings.VOLUME_PATH_POD_VOLUME_DATA)


@router.get("/list-file-pod", response_class=PlainTextResponse)
def list_file_pod(settings: Settings = Depends(get_settings)) -> str:
    return list_files(settings.VOLUME_PATH_POD_VOLUME_DATA)
