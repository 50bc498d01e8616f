from assets import AssetResolver, AssetStatus


def test_missing_path_is_not_found(asset_root):
    resolver = AssetResolver(asset_root)
    assert resolver.resolve(None).status is AssetStatus.NOT_FOUND
    assert resolver.resolve("").status is AssetStatus.NOT_FOUND


def test_missing_file_is_not_found(asset_root):
    asset = AssetResolver(asset_root).resolve("uploads/nope.png")
    assert asset.status is AssetStatus.NOT_FOUND
    assert not asset.found


def test_corrupt_file_is_decode_error(asset_root, corrupt_photo):
    asset = AssetResolver(asset_root).resolve(corrupt_photo)
    assert asset.status is AssetStatus.DECODE_ERROR
    assert asset.reader is None


def test_found_image(asset_root, make_photo):
    asset = AssetResolver(asset_root).resolve(make_photo(size=(30, 40)))
    assert asset.found
    assert (asset.width, asset.height) == (30, 40)
    assert asset.reader is not None


def test_paths_outside_root_are_not_found(asset_root, tmp_path):
    outside = tmp_path / "secret.png"
    outside.write_bytes(b"x")
    assert AssetResolver(asset_root).resolve("../secret.png").status is AssetStatus.NOT_FOUND


def test_directory_is_not_found(asset_root):
    assert AssetResolver(asset_root).resolve("uploads").status is AssetStatus.NOT_FOUND


def test_unusable_paths_are_not_found(asset_root):
    resolver = AssetResolver(asset_root)
    assert resolver.resolve("uploads/" + "a" * 300 + ".jpg").status is AssetStatus.NOT_FOUND
    assert resolver.resolve("uploads/x\x00.jpg").status is AssetStatus.NOT_FOUND
