# pocketpet

The behaviour core of a small desktop companion robot: it spots a face in
a camera frame and works out where to look, drives a pan/tilt head on two
servos, tells which side of the device is up, runs a Pomodoro timer that
you pick by turning the device on its side, keeps photos on disk and pages
through them, watches the battery, asks a remote service to describe a
picture, and answers a small HTTP control panel.

Everything that would touch hardware comes in from outside. Clocks are
plain callables that return milliseconds, the servo driver writes to an
I2C bus object you provide, the battery reader is a function that returns
millivolts, and storage is a directory on disk. Every part can be driven
from a simulation or a test.

The package has no runtime dependencies beyond the standard library.

## Modules

| Module | Purpose |
| --- | --- |
| `pocketpet.face_detector` | `FaceDetector` finds a skin-coloured blob in a big-endian RGB565 frame and returns a `FaceResult`; `is_skin_pixel` is the pixel test it uses. |
| `pocketpet.face_tracker` | `FaceTracker` smooths detections into a gaze offset between -1 and 1 and forgets the face after a timeout. |
| `pocketpet.face_tracking_controller` | `FaceTrackingController` turns detections into `(pan, tilt)` degree corrections with a filter, a deadband and a gain. |
| `pocketpet.servo_controller` | `ServoController` drives a PCA9685 PWM chip for the pan and tilt servos, configured by `ServoConfig`. |
| `pocketpet.imu_orientation` | `ImuOrientation` reports which side is up (`Orientation`), shakes, and twists (`TwistDirection`); `orientation_name` gives a readable name. |
| `pocketpet.power` | `PowerManager` turns battery voltage into a charge fraction and calls you back on low and critical battery. |
| `pocketpet.vision_client` | `VisionClient` posts a JPEG to an image-description endpoint; `parse_response` picks the text out of its JSON reply; failures raise `VisionError`. |
| `pocketpet.storage` | `StorageManager` keeps photos as `IMG_0001.jpg`, `IMG_0002.jpg`, ... in a photo directory. |
| `pocketpet.album` | `AlbumBrowser` pages through photos in a grid and a full view (`AlbumViewMode`, `AlbumHitZone`). |
| `pocketpet.web_server` | `PetWebServer` answers the control panel's JSON API through the hooks in `WebControlCallbacks`. |
| `pocketpet.affinity` | `AffinityScreen` holds the bond meter state (`AffinityHitZone`). |
| `pocketpet.pomodoro` | `PomodoroTimer` with four `PomoPreset`s chosen by orientation (`PomodoroState`, `PomoHitZone`). |
| `pocketpet.settings` | `SettingsScreen` for brightness and volume levels 0–2 (`SettingsHitZone`). |

## A short tour

Follow a face with the eyes:

```python
from pocketpet.face_detector import FaceDetector
from pocketpet.face_tracker import FaceTracker

detector = FaceDetector(enabled_on_boot=True)
detector.begin()

tracker = FaceTracker(frame_width=320, frame_height=240, timeout_ms=2000, clock=my_millis)

face = detector.detect(frame_bytes, 320, 240)
tracker.update(face)
if tracker.has_face():
    print(tracker.gaze_x(), tracker.gaze_y())
```

Turn the head toward it:

```python
from pocketpet.face_tracking_controller import FaceTrackingController
from pocketpet.servo_controller import ServoConfig, ServoController

servo = ServoController(my_bus, ServoConfig(address=0x40))
servo.begin()
steer = FaceTrackingController()

deltas = steer.update(face, 320, 240)
if deltas is not None:
    pan_delta, tilt_delta = deltas
    servo.set_pan_tilt(servo.pan_angle + pan_delta, servo.tilt_angle + tilt_delta)
```

The bus object needs `begin()`, `probe(address)` returning a bool, and
`write(address, register, data)`; `begin` and `write` raise `OSError` on
failure.

Pick a timer by turning the device:

```python
from pocketpet.imu_orientation import ImuOrientation
from pocketpet.pomodoro import PomodoroTimer

imu = ImuOrientation(clock=my_millis)
timer = PomodoroTimer(clock=my_millis, ring_ms=5000, width=320, height=240, base_rotation=1)
timer.show()

imu.update(ax, ay, az, gz)
timer.set_orientation(imu.stable())
timer.toggle_pause()   # start
timer.update()
print(timer.status_text(), timer.time_text)
```

Keep photos on disk and browse them:

```python
from pocketpet.album import AlbumBrowser
from pocketpet.storage import StorageManager

storage = StorageManager(root="/media/card", photo_dir="photos")
if storage.begin():
    storage.write_file(storage.next_photo_path(), jpeg_bytes)

album = AlbumBrowser(storage)
album.scan_photos()          # newest first
album.show_photo(0)
```

Describe a picture:

```python
from pocketpet.vision_client import VisionClient, VisionError

client = VisionClient(timeout=15.0)
try:
    print(client.describe_image("https://vision.example.com/describe", "token", jpeg_bytes))
except VisionError as err:
    print(err.status)
```

Serve the control panel by giving `PetWebServer` a `WebControlCallbacks`
with the hooks you support, then calling `begin(port, host)` and later
`stop()`. `handle(method, path, body)` answers a single request without a
socket and returns a `WebResponse`, which is handy in tests. Firmware
uploads to `/api/ota` go to the `install_firmware` hook, which reports
failure by raising `OtaError`; on success the `restart` hook is called
shortly after the reply is sent.

## What the package does not do

- It draws nothing. The screen classes (`AlbumBrowser`, `AffinityScreen`,
  `PomodoroTimer`, `SettingsScreen`) hold state, say when a redraw is due
  and answer touch hit tests; rendering is up to you.
- It has no animated face: blinking, expressions and particles are not
  included.
- It has no smooth head motion or canned head gestures: `ServoController`
  moves the servos straight to the angles it is given, and the `/api/servo`
  route only passes the action name to your `servo_control` hook.
- It does not capture camera frames, manage Wi-Fi or put a device to sleep;
  frames, connectivity (`VisionClient`'s `is_connected`) and battery
  readings come from callables you supply.
- It installs no command; everything is used as a library.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.