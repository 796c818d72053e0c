from astro_organizer.maintenance import remove_empty_directories, remove_jpg_thumbnails


def test_remove_jpg_thumbnails(tmp_path):
    (tmp_path / "a").mkdir()
    thumb = tmp_path / "a" / "Light_M51_0001_thn.jpg"
    thumb.write_bytes(b"jpg")
    keep = tmp_path / "a" / "Light_M51_0001.jpg"
    keep.write_bytes(b"jpg")

    removed = remove_jpg_thumbnails(tmp_path)

    assert removed == [thumb]
    assert not thumb.exists()
    assert keep.exists()


def test_remove_jpg_thumbnails_dry_run(tmp_path):
    thumb = tmp_path / "x_thn.jpg"
    thumb.write_bytes(b"jpg")

    assert remove_jpg_thumbnails(tmp_path, dry_run=True) == [thumb]
    assert thumb.exists()


def test_remove_empty_directories(tmp_path):
    nested = tmp_path / "old" / "deeper"
    nested.mkdir(parents=True)
    (nested / ".DS_Store").write_bytes(b"junk")
    busy = tmp_path / "busy"
    busy.mkdir()
    (busy / "Dark_1.fit").write_bytes(b"fits")

    removed = remove_empty_directories(tmp_path)

    assert removed == [nested, tmp_path / "old"]
    assert not (tmp_path / "old").exists()
    assert busy.exists()
    assert tmp_path.exists()


def test_remove_empty_directories_dry_run(tmp_path):
    nested = tmp_path / "old" / "deeper"
    nested.mkdir(parents=True)
    (nested / ".DS_Store").write_bytes(b"junk")

    removed = remove_empty_directories(tmp_path, dry_run=True)

    assert removed == [nested, tmp_path / "old"]
    assert (nested / ".DS_Store").exists()


def test_root_ds_store_is_kept(tmp_path):
    (tmp_path / ".DS_Store").write_bytes(b"junk")
    assert remove_empty_directories(tmp_path) == []
    assert (tmp_path / ".DS_Store").exists()
