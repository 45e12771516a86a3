"""Shared fixtures for crossplane-diagnose pipeline tests.

Builds a small Crossplane-shaped cluster in a FakeResourceAPI: a database
composite with a failing managed resource, a network composite that nests
another composite, and a healthy bucket composite.
"""

from __future__ import annotations

import io

import pytest

from crossplane_diagnose.app import DiagnoseApp
from crossplane_diagnose.models.config import DiagnoseConfig
from crossplane_diagnose.models.tree import CompositeItem

from tests.fakes import FakeResourceAPI, cond, healthy, make_event, make_object, ref_to

XR_API = "platform.example.org/v1alpha1"


@pytest.fixture
def cluster() -> FakeResourceAPI:
    api = FakeResourceAPI()

    # --- XDatabase/my-db: Available root with an unhealthy RDS instance --------
    rds = make_object(
        "RDSInstance",
        "my-db-abc",
        api_version="rds.aws.upbound.io/v1beta1",
        conditions=[cond("Ready", "False", "CreateFailed", "AWS error"), cond("Synced", "True")],
    )
    db = make_object("XDatabase", "my-db", api_version=XR_API, conditions=healthy(), refs=[ref_to(rds)])
    api.add(db, rds)
    api.add_events("RDSInstance", "my-db-abc", make_event("Warning", "CannotCreateExternalResource", "AWS error"))

    # --- XNetwork/core nests XSubnet/core-a, which is also a discovered root ---
    subnet = make_object(
        "Subnet",
        "core-a-xyz",
        api_version="ec2.aws.upbound.io/v1beta1",
        conditions=healthy(),
    )
    xsubnet = make_object("XSubnet", "core-a", api_version=XR_API, conditions=healthy(), refs=[ref_to(subnet)])
    vpc = make_object("VPC", "core-vpc", api_version="ec2.aws.upbound.io/v1beta1", conditions=healthy())
    network = make_object(
        "XNetwork",
        "core",
        api_version=XR_API,
        conditions=healthy(),
        refs=[ref_to(vpc), {"apiVersion": "", "kind": "Route", "name": "ignored"}, ref_to(xsubnet)],
    )
    api.add(network, vpc, xsubnet, subnet)

    # --- XBucket/assets: entirely healthy --------------------------------------
    bucket = make_object("Bucket", "assets-1", api_version="s3.aws.upbound.io/v1beta1", conditions=healthy())
    xbucket = make_object("XBucket", "assets", api_version=XR_API, conditions=healthy(), refs=[ref_to(bucket)])
    api.add(xbucket, bucket)

    return api


@pytest.fixture
def roots() -> list[CompositeItem]:
    return [
        CompositeItem(api_version=XR_API, kind="XDatabase", name="my-db"),
        CompositeItem(api_version=XR_API, kind="XSubnet", name="core-a"),
        CompositeItem(api_version=XR_API, kind="XNetwork", name="core"),
        CompositeItem(api_version=XR_API, kind="XBucket", name="assets"),
    ]


@pytest.fixture
def streams() -> tuple[io.StringIO, io.StringIO]:
    return io.StringIO(), io.StringIO()


@pytest.fixture
def make_app(streams: tuple[io.StringIO, io.StringIO]):
    out, err = streams

    def _make(config: DiagnoseConfig | None = None) -> DiagnoseApp:
        return DiagnoseApp(config or DiagnoseConfig(), out=out, err=err)

    return _make
