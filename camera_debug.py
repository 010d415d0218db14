import logging
import sys

import cv2

from handspell.backend.ml.fingerspell import FingerspellSession, load_config
from handspell.backend.ml.fingerspell.tracker import HandTracker

CAMERA_INDEX = 0


def main():
    cap = cv2.VideoCapture(CAMERA_INDEX)
    if not cap.isOpened():
        print(f"Camera {CAMERA_INDEX} is not available")
        return 1

    session = FingerspellSession(load_config(), tracker=HandTracker())
    print("\n=== FINGERSPELL (q: quit, c: clear, b: backspace) ===")

    last_stable = None
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break
            frame = cv2.flip(frame, 1)

            out = session.process_frame_bgr(frame)

            if out["stable"] != last_stable or out["mutation"] != "none":
                last_stable = out["stable"]
                print(f"[{out['display']:>12}] text='{out['text']}'")

            cv2.putText(frame, out["stable"], (20, 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 1, (197, 255, 255), 2)
            cv2.putText(frame, out["text"][-30:], (20, frame.shape[0] - 20),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, (255, 255, 255), 2)
            cv2.imshow("handspell", frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("c"):
                session.clear()
            elif key == ord("b"):
                session.backspace()
    finally:
        cap.release()
        session.close()
        cv2.destroyAllWindows()

    print(f"\nFinal text: '{session.text}'")
    print("\n=== END ===\n")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    sys.exit(main())
